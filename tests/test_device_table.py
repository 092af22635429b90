from __future__ import annotations

from pathlib import Path

import pytest

from stm32detect.core.device_table import device_table, load_device_table, lookup_config
from stm32detect.core.errors import DeviceTableError

EXPECTED = {
    "stm32f0x.cfg": [0x440, 0x442, 0x444, 0x445, 0x448],
    "stm32f1x.cfg": [0x410, 0x412, 0x414, 0x418, 0x420, 0x428, 0x430],
    "stm32f2x.cfg": [0x411],
    "stm32f3x.cfg": [0x422, 0x432, 0x438, 0x439, 0x446],
    "stm32f4x.cfg": [0x413, 0x419, 0x421, 0x423, 0x431, 0x433, 0x434, 0x441, 0x458],
    "stm32f7x.cfg": [0x449, 0x451, 0x452],
    "stm32g0x.cfg": [0x456, 0x460, 0x466, 0x467],
    "stm32g4x.cfg": [0x468, 0x469, 0x479],
    "stm32h7x.cfg": [0x450, 0x480, 0x483],
    "stm32l0.cfg": [0x417, 0x425, 0x447, 0x457],
    "stm32l1.cfg": [0x416, 0x427, 0x429, 0x436, 0x437],
    "stm32l4x.cfg": [0x415, 0x435, 0x461, 0x462, 0x464, 0x470, 0x471],
    "stm32l5x.cfg": [0x472],
    "stm32u5x.cfg": [0x476, 0x481],
    "stm32wbx.cfg": [0x495, 0x496],
    "stm32wlx.cfg": [0x497],
}


def _write_table(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def test_every_supported_id_maps_to_its_config() -> None:
    for config, device_ids in EXPECTED.items():
        for device_id in device_ids:
            assert lookup_config(device_id) == config


def test_unlisted_ids_are_not_found() -> None:
    supported = {device_id for ids in EXPECTED.values() for device_id in ids}
    assert len(device_table()) == len(supported)
    for device_id in range(0x1000):
        if device_id not in supported:
            assert lookup_config(device_id) is None


def test_table_is_loaded_once_and_read_only() -> None:
    table = device_table()
    assert device_table() is table
    with pytest.raises(TypeError):
        table.by_device_id[0x999] = table.families[0]  # type: ignore[index]


def test_duplicate_id_across_families_rejected(tmp_path: Path) -> None:
    path = _write_table(
        tmp_path / "table.yaml",
        """
families:
  - name: A
    config: a.cfg
    device_ids: [0x410]
  - name: B
    config: b.cfg
    device_ids: [0x410]
""",
    )
    with pytest.raises(DeviceTableError, match="0x410"):
        load_device_table(path)


def test_out_of_range_id_rejected(tmp_path: Path) -> None:
    path = _write_table(
        tmp_path / "table.yaml",
        """
families:
  - name: A
    config: a.cfg
    device_ids: [0x1410]
""",
    )
    with pytest.raises(DeviceTableError):
        load_device_table(path)


def test_duplicate_yaml_keys_rejected(tmp_path: Path) -> None:
    path = _write_table(
        tmp_path / "table.yaml",
        """
families:
  - name: A
    name: B
    config: a.cfg
    device_ids: [0x410]
""",
    )
    with pytest.raises(DeviceTableError):
        load_device_table(path)
