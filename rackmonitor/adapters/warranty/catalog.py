"""In-memory warranty catalog adapter.

Implements WarrantyPort over a fixed mapping of servers to warranties,
typically loaded from the rack inventory file.
"""

from collections.abc import Mapping

from rackmonitor.core.exceptions import WarrantyNotFoundError
from rackmonitor.core.models import Server, Warranty
from rackmonitor.core.ports import WarrantyPort


class WarrantyCatalog(WarrantyPort):
    """Looks up warranties in a local catalog."""

    def __init__(self, warranties: Mapping[Server, Warranty] | None = None):
        self._warranties: dict[Server, Warranty] = dict(warranties or {})

    def __len__(self) -> int:
        return len(self._warranties)

    def get_warranty_for_server(self, server: Server) -> Warranty:
        try:
            return self._warranties[server]
        except KeyError:
            raise WarrantyNotFoundError(server) from None
