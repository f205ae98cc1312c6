"""JSON file inventory adapter.

Loads rack layout and warranty records from an inventory file, and
reads current health scores from a separate health snapshot file that
is re-read on every sweep.

Inventory format::

    {
      "racks": [
        {"rack_id": "RACK01", "servers": {"TEST001": 1, "TEST002": 2}}
      ],
      "warranties": {
        "TEST001": {"warranty_id": "W-1", "provider": "acme", "expires_on": "2027-01-31"},
        "TEST002": null
      }
    }

A null warranty entry means the server has a record with no entitlement.
Servers absent from "warranties" have no record at all.

Health snapshot format::

    {"RACK01": {"TEST001": 0.95, "TEST002": 0.42}}
"""

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

from rackmonitor.adapters.rack.static import StaticRack
from rackmonitor.adapters.warranty.catalog import WarrantyCatalog
from rackmonitor.core.exceptions import ConfigurationError
from rackmonitor.core.models import Server, Warranty

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Inventory:
    """Racks and warranty catalog loaded from an inventory file."""

    racks: tuple[StaticRack, ...]
    warranties: WarrantyCatalog


class FileHealthSource:
    """Reads one rack's health scores from a JSON snapshot file.

    The file is read on every call so each sweep sees fresh data. A
    missing file or a rack absent from it means no server is reporting.
    """

    def __init__(self, path: str | Path, rack_id: str):
        self.path = Path(path)
        self.rack_id = rack_id

    def __call__(self) -> dict[Server, float]:
        if not self.path.exists():
            logger.warning(f"Health snapshot {self.path} not found, no servers reporting")
            return {}

        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)

        scores = data.get(self.rack_id, {}) if isinstance(data, dict) else {}
        return {Server(server_id): float(score) for server_id, score in scores.items()}


def load_inventory(path: str | Path, health_path: str | Path) -> Inventory:
    """Load racks and warranties from an inventory file.

    Args:
        path: Inventory JSON file.
        health_path: Health snapshot JSON file read by each rack.

    Returns:
        Inventory with one StaticRack per rack entry.

    Raises:
        ConfigurationError: If the file is missing or malformed.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read inventory {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("racks"), list):
        raise ConfigurationError(f"Inventory {path} must contain a 'racks' list")

    try:
        racks = tuple(
            _parse_rack(entry, health_path) for entry in data["racks"]
        )
        _check_unique_rack_ids(racks, path)
        warranties = WarrantyCatalog(
            {
                Server(server_id): _parse_warranty(record)
                for server_id, record in data.get("warranties", {}).items()
            }
        )
    except ConfigurationError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Malformed inventory {path}: {e}") from e

    logger.info(
        f"Loaded inventory {path}: {len(racks)} racks, {len(warranties)} warranties"
    )
    return Inventory(racks=racks, warranties=warranties)


def _parse_rack(entry: dict[str, Any], health_path: str | Path) -> StaticRack:
    rack_id = entry["rack_id"]
    server_units = {
        Server(server_id): _parse_unit(rack_id, server_id, unit)
        for server_id, unit in entry["servers"].items()
    }
    return StaticRack(
        rack_id=rack_id,
        server_units=server_units,
        health=FileHealthSource(health_path, rack_id),
    )


def _parse_warranty(record: dict[str, Any] | None) -> Warranty:
    if record is None:
        return Warranty.null_warranty()
    expires_on = record.get("expires_on")
    return Warranty(
        warranty_id=record["warranty_id"],
        provider=record.get("provider"),
        expires_on=date.fromisoformat(expires_on) if expires_on else None,
    )


def _parse_unit(rack_id: str, server_id: str, unit: Any) -> int:
    # bool is an int subclass; reject it along with floats and strings
    if not isinstance(unit, int) or isinstance(unit, bool):
        raise ConfigurationError(
            f"Rack {rack_id}: unit for {server_id} must be an integer, got {unit!r}"
        )
    return unit


def _check_unique_rack_ids(racks: tuple[StaticRack, ...], path: Path) -> None:
    seen: set[str] = set()
    for rack in racks:
        if rack.rack_id in seen:
            raise ConfigurationError(
                f"Inventory {path} lists rack {rack.rack_id} more than once"
            )
        seen.add(rack.rack_id)
