"""Probe settings: packaged defaults overlaid with an optional user YAML file."""

from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path

from stm32detect.core.documents import read_yaml, validate
from stm32detect.core.errors import SettingsError
from stm32detect.core.model import ProbeSettings

LOGGER = logging.getLogger(__name__)


def settings_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "stm32detect/config.yaml"


def load_settings(path: Path | None = None) -> ProbeSettings:
    """Return probe settings, applying the user config file when it exists.

    A missing file is not an error; the defaults are used as-is.
    """
    source = path or settings_path()
    if not source.is_file():
        return ProbeSettings()

    doc = read_yaml(source, error_cls=SettingsError)
    validate(doc, "settings.schema.json", source, error_cls=SettingsError)
    LOGGER.debug("Loaded settings from %s: %s", source, doc)
    return dataclasses.replace(ProbeSettings(), **doc)


def apply_overrides(settings: ProbeSettings, **overrides: object) -> ProbeSettings:
    """Replace fields whose override is not None."""
    changes = {key: value for key, value in overrides.items() if value is not None}
    return dataclasses.replace(settings, **changes) if changes else settings
