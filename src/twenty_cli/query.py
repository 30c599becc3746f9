"""jq query evaluation for the global ``--query`` flag.

Expressions are compiled and run by the :mod:`jq` bindings, so the full jq
language is available::

    .data.tasks[] | select(.status == "DONE") | .id

:func:`compile_query` compiles once; :meth:`CompiledQuery.apply` yields the
results for one document lazily, in document order. Compile errors and
runtime errors (indexing a string, iterating a number) are both reported as
:class:`~twenty_cli.exceptions.QueryError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

import jq

from twenty_cli.exceptions import QueryError


@dataclass(frozen=True)
class CompiledQuery:
    """A compiled jq program, reusable across input documents."""

    source: str
    program: Any

    def apply(self, value: Any) -> Iterator[Any]:
        """Lazily evaluate the query against *value*.

        *value* must be a plain JSON tree (dicts, lists, scalars).
        """
        results = iter(self.program.input_value(value))
        while True:
            try:
                result = next(results)
            except StopIteration:
                return
            except ValueError as exc:
                raise QueryError(f"query {self.source!r} failed: {exc}") from exc
            yield result


def compile_query(source: str) -> CompiledQuery:
    """Compile *source* into a :class:`CompiledQuery`.

    Raises:
        QueryError: If *source* is empty or not a valid jq program.
    """
    if not source.strip():
        raise QueryError("invalid query: expression is empty")
    try:
        program = jq.compile(source)
    except ValueError as exc:
        raise QueryError(f"invalid query {source!r}: {exc}") from exc
    return CompiledQuery(source, program)


def apply(source: str, value: Any) -> Iterator[Any]:
    """Compile *source* and lazily yield its results for *value*.

    Compilation happens eagerly, so syntax errors surface at call time;
    runtime errors surface while the returned iterator is consumed.
    """
    return compile_query(source).apply(value)
