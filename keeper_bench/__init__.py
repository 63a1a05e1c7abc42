"""
Request generators for coordination-service load tests.

Each generator produces one kind of ZooKeeper request (create, get, list or
set) and keeps just enough state to stay valid against the namespace it
bootstrapped in ``startup``. Generators can be combined into a mixed workload
and are usually obtained by name through :func:`get_generator`.
"""

from .config import GeneratorConfig, GeneratorConfigError, load_generator_config, parse_config
from .factory import build_generator, get_generator
from .generators import (
    CreateRequestGenerator,
    GeneratorStartupError,
    GetRequestGenerator,
    ListRequestGenerator,
    MixedRequestGenerator,
    RequestGenerator,
    SetRequestGenerator,
    request_kind,
)
from .synth import generate_random_data, generate_random_path

__all__ = [
    "CreateRequestGenerator",
    "GeneratorConfig",
    "GeneratorConfigError",
    "GeneratorStartupError",
    "GetRequestGenerator",
    "ListRequestGenerator",
    "MixedRequestGenerator",
    "RequestGenerator",
    "SetRequestGenerator",
    "build_generator",
    "generate_random_data",
    "generate_random_path",
    "get_generator",
    "load_generator_config",
    "parse_config",
    "request_kind",
]
