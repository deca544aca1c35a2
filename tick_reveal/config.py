"""Building sequence configs from static data."""
from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any, Mapping, TypeVar

from tick_reveal.types import (
    CelebrationConfig,
    EntranceConfig,
    InvalidArgument,
    PulseTiming,
    SequenceConfig,
)

_T = TypeVar("_T")

_NUMBER = (int, float)


def _build(cls: type[_T], data: Mapping[str, Any]) -> _T:
    if not isinstance(data, Mapping):
        raise InvalidArgument(f"{cls.__name__} data must be a mapping, got {type(data).__name__}")
    fields = {f.name: f for f in dataclasses.fields(cls)}  # type: ignore[arg-type]
    unknown = sorted(set(data) - set(fields))
    if unknown:
        raise InvalidArgument(f"unknown {cls.__name__} keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    for name, value in data.items():
        if name == "pulse":
            value = value if isinstance(value, PulseTiming) else _build(PulseTiming, value)
        elif name.endswith("_ease"):
            if not isinstance(value, str):
                raise InvalidArgument(f"{name} must be a string, got {value!r}")
        elif isinstance(value, bool) or not isinstance(value, _NUMBER):
            raise InvalidArgument(f"{name} must be a number, got {value!r}")
        elif fields[name].type == "int" and not isinstance(value, int):
            raise InvalidArgument(f"{name} must be an integer, got {value!r}")
        kwargs[name] = value
    return cls(**kwargs)


def load_config(data: Mapping[str, Any]) -> SequenceConfig:
    """Build a SequenceConfig from a mapping. Missing keys keep defaults."""
    return _build(SequenceConfig, data)


def load_celebration_config(data: Mapping[str, Any]) -> CelebrationConfig:
    return _build(CelebrationConfig, data)


def load_entrance_config(data: Mapping[str, Any]) -> EntranceConfig:
    return _build(EntranceConfig, data)


def load_config_file(path: str | Path) -> SequenceConfig:
    """Read a SequenceConfig from a JSON file.

    A file holding ``{"sequence": {...}, "celebration": {...}}`` is also
    accepted; only the ``sequence`` section is read.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict) and "sequence" in data:
        data = data["sequence"]
    return load_config(data)


def load_celebration_config_file(path: str | Path) -> CelebrationConfig:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict) and "celebration" in data:
        data = data["celebration"]
    return load_celebration_config(data)


def config_to_dict(
    config: SequenceConfig | CelebrationConfig | EntranceConfig,
) -> dict[str, Any]:
    """Plain-data form of a config, suitable for ``json.dumps``."""
    return dataclasses.asdict(config)
