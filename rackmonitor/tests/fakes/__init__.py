"""Fake implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeRackPort: Configurable health scores and unit slots
- FakeWarrantyPort: Canned warranties, or not-found for unknown servers
- FakeFulfillmentPort: Captured replacement requests for assertion
- FakeMonitorPort: Canned sweep results for scheduler tests
"""

from .fulfillment import FakeFulfillmentPort
from .monitor import FakeMonitorPort
from .rack import FakeRackPort
from .warranty import FakeWarrantyPort

__all__ = [
    "FakeFulfillmentPort",
    "FakeMonitorPort",
    "FakeRackPort",
    "FakeWarrantyPort",
]
