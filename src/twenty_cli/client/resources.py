"""Typed CRUD access to one REST resource.

Every Twenty object is served under the same routes::

    GET    /rest/{plural}          list   -> {"data": {"{plural}": [...]}, "totalCount": N, "pageInfo": {...}}
    GET    /rest/{plural}/{id}     get    -> {"data": {"{singular}": {...}}}
    POST   /rest/{plural}          create -> {"data": {"create{Singular}": {...}}}
    PATCH  /rest/{plural}/{id}     update -> {"data": {"update{Singular}": {...}}}
    DELETE /rest/{plural}/{id}     delete

:class:`ResourceEndpoint` unwraps these envelopes into
:class:`~twenty_cli.models.ListResult` pages and record models. Some
endpoints (webhooks) answer with bare arrays and objects instead; both
shapes are accepted, with :func:`~twenty_cli.records.extract_records` as the
fallback when the expected key is missing.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar
from urllib.parse import quote

from pydantic import ValidationError

from twenty_cli.client.list_params import build_list_params
from twenty_cli.client.rest import RestClient
from twenty_cli.exceptions import UnexpectedResponseError
from twenty_cli.models import ListQueryOptions, ListResult, PageInfo, Record
from twenty_cli.records import extract_records

R = TypeVar("R", bound=Record)


class ResourceEndpoint(Generic[R]):
    """CRUD calls for one resource, parsed into *model* instances.

    Args:
        model: Record class used to validate each returned object.
        plural: Route and list-envelope key, e.g. ``"people"``.
        singular: Get-envelope key, e.g. ``"person"``.
        paginated: ``False`` for endpoints that return everything at once;
            list parameters are then not sent.
    """

    def __init__(
        self,
        model: type[R],
        plural: str,
        singular: str,
        paginated: bool = True,
    ) -> None:
        self.model = model
        self.plural = plural
        self.singular = singular
        self.paginated = paginated

    @property
    def path(self) -> str:
        return f"/rest/{self.plural}"

    def item_path(self, record_id: str) -> str:
        return f"{self.path}/{quote(record_id, safe='')}"

    # ------------------------------------------------------------------ #
    # Typed calls
    # ------------------------------------------------------------------ #

    def list(self, client: RestClient, options: ListQueryOptions) -> ListResult[R]:
        """Fetch one page of records."""
        params = build_list_params(options) if self.paginated else None
        document = client.get(self.path, params=params)
        return self.parse_page(document)

    def get(self, client: RestClient, record_id: str) -> R:
        """Fetch one record by ID."""
        document = client.get(self.item_path(record_id))
        return self._validate(_unwrap(document, self.singular), document)

    def create(self, client: RestClient, payload: dict[str, Any]) -> R:
        """Create a record and return it as stored by the server."""
        document = self.create_raw(client, payload)
        return self._validate(_unwrap(document, f"create{_capitalize(self.singular)}"), document)

    def update(self, client: RestClient, record_id: str, payload: dict[str, Any]) -> R:
        """Apply a partial update and return the updated record."""
        document = self.update_raw(client, record_id, payload)
        return self._validate(_unwrap(document, f"update{_capitalize(self.singular)}"), document)

    def delete(self, client: RestClient, record_id: str) -> None:
        """Delete a record."""
        client.delete(self.item_path(record_id))

    # ------------------------------------------------------------------ #
    # Raw calls (envelope kept for --query)
    # ------------------------------------------------------------------ #

    def create_raw(self, client: RestClient, payload: Any) -> Any:
        return client.post(self.path, json_body=payload)

    def update_raw(self, client: RestClient, record_id: str, payload: Any) -> Any:
        return client.patch(self.item_path(record_id), json_body=payload)

    # ------------------------------------------------------------------ #
    # Envelope parsing
    # ------------------------------------------------------------------ #

    def parse_page(self, document: Any) -> ListResult[R]:
        """Turn a list response of either shape into a :class:`ListResult`."""
        if isinstance(document, dict):
            data = document.get("data")
            if isinstance(data, dict) and isinstance(data.get(self.plural), list):
                items = data[self.plural]
            else:
                items = extract_records(document)
            total = document.get("totalCount")
            page_info = document.get("pageInfo")
        else:
            items = extract_records(document)
            total = None
            page_info = None

        records = [self._validate(item, document) for item in items if isinstance(item, dict)]
        return ListResult[self.model](  # type: ignore[name-defined]
            data=records,
            total_count=total if isinstance(total, int) else len(records),
            page_info=PageInfo.model_validate(page_info) if isinstance(page_info, dict) else None,
        )

    def _validate(self, item: Any, document: Any) -> R:
        try:
            return self.model.model_validate(item)
        except ValidationError as exc:
            record_id = item.get("id") if isinstance(item, dict) else None
            where = f" {record_id}" if record_id else ""
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise UnexpectedResponseError(
                f"unexpected {self.singular}{where} in response: {problems}",
                body=document,
            ) from exc


def _unwrap(document: Any, key: str) -> Any:
    if isinstance(document, dict) and isinstance(document.get("data"), dict):
        data = document["data"]
        if isinstance(data.get(key), dict):
            return data[key]
        if len(data) == 1:
            (only,) = data.values()
            if isinstance(only, dict):
                return only
        return data
    return document if document is not None else {}


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]

