from __future__ import annotations

import logging

from .config import GeneratorConfig, resolve_name
from .generators import (
    CreateRequestGenerator,
    GetRequestGenerator,
    ListRequestGenerator,
    MixedRequestGenerator,
    RequestGenerator,
    SetRequestGenerator,
)

LOGGER = logging.getLogger("keeper_bench.factory")

GENERATOR_CLASSES: dict[str, type[RequestGenerator]] = {
    "create": CreateRequestGenerator,
    "get": GetRequestGenerator,
    "list": ListRequestGenerator,
    "set": SetRequestGenerator,
}


def build_generator(config: GeneratorConfig) -> RequestGenerator:
    if config.kind == "mixed":
        return MixedRequestGenerator([build_generator(child) for child in config.children])

    options = {name: value for name, value in config.options.items() if value is not None}
    return GENERATOR_CLASSES[config.kind](**options)


def get_generator(name: str) -> RequestGenerator:
    generator = build_generator(resolve_name(name))
    LOGGER.debug("Built %s for %r", type(generator).__name__, name)
    return generator
