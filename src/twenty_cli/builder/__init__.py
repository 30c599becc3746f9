"""Generic resource command builder.

Turns a per-resource configuration into Typer ``list``/``get``/``create``/
``update``/``delete`` commands that share flag parsing, pagination and
rendering.
"""

from twenty_cli.builder.crud import (
    CreateConfig,
    DeleteConfig,
    UpdateConfig,
    new_create_command,
    new_delete_command,
    new_update_command,
)
from twenty_cli.builder.get import GetConfig, new_get_command
from twenty_cli.builder.list import ListConfig, new_list_command
from twenty_cli.builder.options import FlagSpec
from twenty_cli.builder.paginate import paginate
from twenty_cli.builder.resource import (
    ResourceCommandConfig,
    build_resource_app,
    endpoint_commands,
)

__all__ = [
    "CreateConfig",
    "DeleteConfig",
    "FlagSpec",
    "GetConfig",
    "ListConfig",
    "ResourceCommandConfig",
    "UpdateConfig",
    "build_resource_app",
    "endpoint_commands",
    "new_create_command",
    "new_delete_command",
    "new_get_command",
    "new_list_command",
    "new_update_command",
    "paginate",
]
