"""Stdout fulfillment adapter.

Implements FulfillmentPort by printing replacement requests to the
terminal with human-readable formatting. Useful for dry runs where no
fulfillment service is wired in.
"""

from datetime import datetime, timezone

from rackmonitor.core.models import Warranty
from rackmonitor.core.ports import FulfillmentPort, RackPort


class StdoutFulfillmentAdapter(FulfillmentPort):
    """Prints replacement requests to stdout."""

    def __init__(self, verbose: bool = False):
        """Initialize stdout fulfillment adapter.

        Args:
            verbose: If True, include warranty details in output.
        """
        self.verbose = verbose
        self.requests: list[tuple[str, int, Warranty]] = []

    def request_replacement(
        self, rack: RackPort, unit: int, warranty: Warranty
    ) -> None:
        """Print a replacement request and remember it."""
        self.requests.append((rack.rack_id, unit, warranty))
        print(self._format_request(rack, unit, warranty, self.verbose))

    @staticmethod
    def _format_request(
        rack: RackPort, unit: int, warranty: Warranty, verbose: bool
    ) -> str:
        """Format a replacement request block."""
        lines = [
            "=" * 80,
            "REPLACEMENT REQUEST",
            "=" * 80,
            f"Rack: {rack.rack_id}",
            f"Unit: {unit}",
            f"Warranty: {'NONE' if warranty.is_null else warranty.warranty_id}",
        ]

        if verbose and not warranty.is_null:
            lines.extend(
                [
                    f"Provider: {warranty.provider or 'unknown'}",
                    f"Expires: {warranty.expires_on or 'unknown'}",
                ]
            )

        lines.extend(
            [
                f"Requested At: {datetime.now(timezone.utc).isoformat()}",
                "=" * 80,
            ]
        )
        return "\n".join(lines)
