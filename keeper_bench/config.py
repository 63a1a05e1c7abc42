from __future__ import annotations

import json
import types
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .synth import validate_path


class GeneratorConfigError(ValueError):
    """Raised for unknown generator names or invalid generator options."""


KIND_OPTIONS: dict[str, tuple[str, ...]] = {
    "create": ("path_prefix", "path_length", "data_size"),
    "get": ("path_prefix", "num_nodes", "nodes_data_size", "seed"),
    "list": ("path_prefix", "num_nodes", "paths_length"),
    "set": ("path_prefix", "data_size"),
    "mixed": (),
}

_POSITIVE_OPTIONS = {"path_length", "paths_length"}


@dataclass(frozen=True)
class GeneratorConfig:
    """Declarative description of one generator, or of a mix of them."""

    kind: str
    options: Mapping[str, Any] = field(default_factory=dict, hash=False)
    children: tuple[GeneratorConfig, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", types.MappingProxyType(dict(self.options)))
        if not isinstance(self.kind, str) or self.kind not in KIND_OPTIONS:
            raise GeneratorConfigError(f"unknown generator type {self.kind!r}")
        unknown = set(self.options) - set(KIND_OPTIONS[self.kind])
        if unknown:
            raise GeneratorConfigError(
                f"unsupported option(s) for {self.kind} generator: {', '.join(sorted(unknown))}"
            )
        for name, value in self.options.items():
            _check_option(name, value)
        if self.kind == "mixed" and not self.children:
            raise GeneratorConfigError("mixed generator needs at least one child generator")
        if self.kind != "mixed" and self.children:
            raise GeneratorConfigError(f"{self.kind} generator cannot have child generators")


def _check_option(name: str, value: Any) -> None:
    if name == "path_prefix":
        if not isinstance(value, str):
            raise GeneratorConfigError(f"path_prefix must be a string, got {value!r}")
        try:
            validate_path(value)
        except ValueError as exc:
            raise GeneratorConfigError(str(exc)) from exc
        return
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise GeneratorConfigError(f"{name} must be an integer, got {value!r}")
    if name == "seed":
        return
    if value < 0 or (name in _POSITIVE_OPTIONS and value == 0):
        raise GeneratorConfigError(f"{name} out of range: {value}")


def _create(path_length: int | None = None, data_size: int | None = None) -> GeneratorConfig:
    return GeneratorConfig(
        "create", {"path_prefix": "/create_generator", "path_length": path_length, "data_size": data_size}
    )


def _get(num_nodes: int, nodes_data_size: int) -> GeneratorConfig:
    return GeneratorConfig(
        "get", {"path_prefix": "/get_generator", "num_nodes": num_nodes, "nodes_data_size": nodes_data_size}
    )


def _list(num_nodes: int, paths_length: int) -> GeneratorConfig:
    return GeneratorConfig(
        "list", {"path_prefix": "/list_generator", "num_nodes": num_nodes, "paths_length": paths_length}
    )


def _set(data_size: int) -> GeneratorConfig:
    return GeneratorConfig("set", {"path_prefix": "/set_generator", "data_size": data_size})


BIG_DATA_SIZE = 512 * 1024

PRESETS: dict[str, GeneratorConfig] = {
    "create_generator": GeneratorConfig("create"),
    "get_generator": GeneratorConfig("get"),
    "list_generator": GeneratorConfig("list"),
    "set_generator": GeneratorConfig("set"),
    "create_no_data": _create(5),
    "create_small_data": _create(5, 32),
    "create_medium_data": _create(5, 1024),
    "create_big_data": _create(5, BIG_DATA_SIZE),
    "get_no_data": _get(10, 0),
    "get_small_data": _get(10, 32),
    "get_medium_data": _get(10, 1024),
    "get_big_data": _get(10, BIG_DATA_SIZE),
    "list_no_nodes": _list(0, 1),
    "list_few_nodes": _list(10, 5),
    "list_medium_nodes": _list(1000, 5),
    "list_a_lot_nodes": _list(100000, 5),
    "set_small_data": _set(5),
    "mixed_small_data": GeneratorConfig("mixed", children=(_set(5), _get(10, 32))),
}


def resolve_name(name: str) -> GeneratorConfig:
    """Resolve a preset name, or a comma-joined list of names, to a config."""

    parts = [part.strip() for part in name.split(",")]
    if len(parts) > 1:
        if not all(parts):
            raise GeneratorConfigError(f"empty generator name in {name!r}")
        return GeneratorConfig("mixed", children=tuple(resolve_name(part) for part in parts))

    config = PRESETS.get(parts[0])
    if config is None:
        raise GeneratorConfigError(f"unknown generator {name!r}")
    return config


def parse_config(value: str | Mapping[str, Any]) -> GeneratorConfig:
    if isinstance(value, str):
        return resolve_name(value)
    if not isinstance(value, Mapping):
        raise GeneratorConfigError(f"generator config must be a name or a mapping, got {value!r}")

    options = dict(value)
    kind = options.pop("type", None)
    if kind is None:
        raise GeneratorConfigError(f"generator config is missing 'type': {value!r}")
    if kind == "mixed":
        children = options.pop("generators", None)
        if not isinstance(children, list):
            raise GeneratorConfigError("mixed generator config needs a 'generators' list")
        return GeneratorConfig(
            "mixed", options, children=tuple(parse_config(child) for child in children)
        )
    return GeneratorConfig(kind, options)


def load_generator_config(path: str | Path) -> GeneratorConfig:
    """Read a generator description from a JSON file."""

    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise GeneratorConfigError(f"cannot read generator config {path}: {exc}") from exc
    return parse_config(raw)
