"""Config commands -- view and modify the global configuration.

Provides the ``twenty config`` sub-command group for reading and
updating the user's :class:`~twenty_cli.models.GlobalConfig`. Settings are
persisted in the twenty config directory and provide the lowest-precedence
defaults for base URL, output format, default profile and request
behaviour.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError

from twenty_cli.config import global_config_path, load_global_config, save_global_config
from twenty_cli.exceptions import InvalidUsageError
from twenty_cli.models import GlobalConfig
from twenty_cli.output import get_output
from twenty_cli.runtime import current_runtime

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the stored configuration.

    Example::

        twenty config show
        twenty -o json config show
    """
    config = load_global_config()
    get_output().debug(f"Config file: {global_config_path()}")
    current_runtime().renderer().render_value(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g. 'request.timeout')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the current setting (bool, int or
    str) and the result is validated before it is saved.

    Example::

        twenty config set output json
        twenty config set request.max_retries 5
    """
    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for part in keys[:-1]:
        if not isinstance(target.get(part), dict):
            raise InvalidUsageError(f"invalid config key: {key}")
        target = target[part]

    final_key = keys[-1]
    if final_key not in target:
        raise InvalidUsageError(f"unknown config key: {key}")

    current = target[final_key]
    coerced: object = value
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            raise InvalidUsageError(f"expected integer for {key}, got: {value}") from None
    target[final_key] = coerced

    try:
        config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidUsageError(f"invalid value for {key}: {exc}") from exc

    save_global_config(config)
    get_output().success(f"Set {key} = {coerced}")


@config_app.command("path")
def config_path() -> None:
    """Print the path of the config file."""
    get_output().print_data(str(global_config_path()))
