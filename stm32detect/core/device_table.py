"""Packaged DEV_ID -> OpenOCD target configuration table."""

from __future__ import annotations

import functools
from collections.abc import Mapping
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from types import MappingProxyType
from typing import Any

from stm32detect.core.documents import read_yaml, validate
from stm32detect.core.errors import DeviceTableError
from stm32detect.core.model import DeviceFamily


@dataclass(frozen=True)
class DeviceTable:
    families: tuple[DeviceFamily, ...]
    by_device_id: Mapping[int, DeviceFamily]

    def family_for(self, device_id: int) -> DeviceFamily | None:
        return self.by_device_id.get(device_id)

    def config_for(self, device_id: int) -> str | None:
        family = self.family_for(device_id)
        return family.config if family else None

    def __len__(self) -> int:
        return len(self.by_device_id)


def _build_table(doc: dict[str, Any], source: Path | Traversable) -> DeviceTable:
    validate(doc, "device_table.schema.json", source, error_cls=DeviceTableError)

    families: list[DeviceFamily] = []
    by_device_id: dict[int, DeviceFamily] = {}
    for entry in doc["families"]:
        family = DeviceFamily(
            name=entry["name"],
            config=entry["config"],
            device_ids=tuple(entry["device_ids"]),
        )
        for device_id in family.device_ids:
            other = by_device_id.get(device_id)
            if other is not None:
                raise DeviceTableError(
                    f"Device ID 0x{device_id:03X} listed for both {other.name} and {family.name} in {source}"
                )
            by_device_id[device_id] = family
        families.append(family)

    return DeviceTable(families=tuple(families), by_device_id=MappingProxyType(by_device_id))


def load_device_table(path: Path | Traversable | None = None) -> DeviceTable:
    """Load and validate a device table document (the packaged one by default)."""
    source = path or resources.files("stm32detect.data").joinpath("device_table.yaml")
    doc = read_yaml(source, error_cls=DeviceTableError)
    return _build_table(doc, source)


@functools.lru_cache(maxsize=1)
def device_table() -> DeviceTable:
    """Process-wide packaged table, built on first use and never mutated."""
    return load_device_table()


def lookup_config(device_id: int) -> str | None:
    """Return the configuration file for a 12-bit device ID, or None when unsupported."""
    return device_table().config_for(device_id)
