"""HTTP layer: the REST transport and typed per-resource endpoints.

Re-exports :class:`~twenty_cli.client.rest.RestClient` and
:class:`~twenty_cli.client.resources.ResourceEndpoint`.
"""

from twenty_cli.client.resources import ResourceEndpoint
from twenty_cli.client.rest import RestClient

__all__ = ["RestClient", "ResourceEndpoint"]
