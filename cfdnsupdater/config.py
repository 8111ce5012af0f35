"""Loading and validation of the updater's JSON configuration file."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = "config.json"


class ConfigError(Exception):
    """Raised when a configuration cannot be read or is malformed."""


def _field(data: Any, key: str, kind: type, what: str) -> Any:
    if not isinstance(data, Mapping):
        raise ConfigError(f"{what} must be a JSON object")
    try:
        value = data[key]
    except KeyError:
        raise ConfigError(f"{what} is missing field {key!r}") from None
    if kind is int:
        valid = isinstance(value, int) and not isinstance(value, bool)
    else:
        valid = isinstance(value, kind)
    if not valid:
        raise ConfigError(f"field {key!r} of {what} must be of type {kind.__name__}")
    return value


def _strings(data: Any, key: str, what: str) -> tuple[str, ...]:
    values = _field(data, key, list, what)
    if not all(isinstance(value, str) for value in values):
        raise ConfigError(f"field {key!r} of {what} must hold only strings")
    return tuple(values)


@dataclass(frozen=True)
class Zone:
    """A Cloudflare zone and the record names to keep up to date in it."""

    zone_id: str
    a_records: tuple[str, ...] = ()
    aaaa_records: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> Zone:
        """Build a zone from its configuration object."""
        return cls(
            zone_id=_field(data, "ZoneId", str, "zone"),
            a_records=_strings(data, "ARecords", "zone"),
            aaaa_records=_strings(data, "AaaaRecords", "zone"),
        )


@dataclass(frozen=True)
class Key:
    """An API token together with the zones it may update."""

    auth_key: str
    zones: tuple[Zone, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> Key:
        """Build a key entry from its configuration object."""
        zones = _field(data, "Zones", list, "key")
        return cls(
            auth_key=_field(data, "AuthKey", str, "key"),
            zones=tuple(Zone.from_dict(zone) for zone in zones),
        )


@dataclass(frozen=True)
class Config:
    """The whole updater configuration."""

    update_threshold: int
    keys: tuple[Key, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        """Build a configuration from the parsed JSON document."""
        threshold = _field(data, "UpdateThreshold", int, "config")
        if threshold < 0:
            raise ConfigError("field 'UpdateThreshold' of config must not be negative")
        keys = _field(data, "Keys", list, "config")
        return cls(
            update_threshold=threshold,
            keys=tuple(Key.from_dict(key) for key in keys),
        )


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    """Read and parse the configuration file at ``path``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"cannot parse config file {path}: {exc}") from exc
    return Config.from_dict(data)