"""Fulfillment adapters for requesting server replacements.

Implementations support:
- Stdout (terminal pretty-print, for dry runs)
"""

from .stdout import StdoutFulfillmentAdapter

__all__ = ["StdoutFulfillmentAdapter"]
