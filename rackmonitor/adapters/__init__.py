"""External adapters for the rack health monitor.

This package contains all external integrations and provides
implementations of the core port interfaces.

Adapter Organization:

- rack/: RackPort implementations (in-memory racks)
- inventory/: Loading racks and warranties from inventory files
- warranty/: WarrantyPort implementations (local catalog)
- fulfillment/: FulfillmentPort implementations (stdout)
- scheduler/: Adapters for driving monitoring sweeps (daemon)
"""
