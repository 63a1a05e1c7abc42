from __future__ import annotations

import contextlib
import logging
import random
from typing import Iterator, Sequence, Union

from kazoo.client import KazooClient
from kazoo.exceptions import KazooException, NodeExistsError
from kazoo.protocol.serialization import Create, GetChildren, GetData, SetData
from kazoo.security import OPEN_ACL_UNSAFE

from .client import ensure_node
from .config import GeneratorConfigError
from .synth import (
    DEFAULT_NAME_LENGTH,
    generate_random_data,
    generate_random_path,
    name_space_size,
    validate_path,
)

LOGGER = logging.getLogger("keeper_bench.generators")

PERSISTENT = 0
ANY_VERSION = -1

Request = Union[Create, GetData, GetChildren, SetData]

_REQUEST_KINDS: dict[type, str] = {
    Create: "create",
    GetData: "get",
    GetChildren: "list",
    SetData: "set",
}


class GeneratorStartupError(RuntimeError):
    """Raised when a generator cannot bootstrap its share of the namespace."""


def request_kind(request: object) -> str:
    try:
        return _REQUEST_KINDS[type(request)]
    except KeyError:
        raise TypeError(f"not a request descriptor: {request!r}") from None


@contextlib.contextmanager
def _bootstrap(generator: RequestGenerator) -> Iterator[None]:
    try:
        yield
    except KazooException as exc:
        raise GeneratorStartupError(
            f"{type(generator).__name__} startup failed: {exc!r}"
        ) from exc


class RequestGenerator:
    """Produces one request descriptor per ``generate`` call.

    ``startup`` runs once against a live client before any ``generate`` call
    and is the only place a generator touches the service.
    """

    def __init__(self) -> None:
        self.default_acls = tuple(OPEN_ACL_UNSAFE)

    def startup(self, client: KazooClient) -> None:
        return None

    def generate(self) -> Request:
        raise NotImplementedError


class CreateRequestGenerator(RequestGenerator):
    def __init__(
        self,
        path_prefix: str = "/create_generator",
        path_length: int | None = None,
        data_size: int | None = None,
    ) -> None:
        super().__init__()
        self.path_prefix = validate_path(path_prefix)
        self.path_length = path_length
        self.data_size = data_size
        self.paths_created: set[str] = set()

    def startup(self, client: KazooClient) -> None:
        with _bootstrap(self):
            ensure_node(client, self.path_prefix, self.default_acls)

    def generate(self) -> Create:
        length = self.path_length or DEFAULT_NAME_LENGTH
        if len(self.paths_created) >= name_space_size(length):
            raise GeneratorConfigError(
                f"all {len(self.paths_created)} names of length {length} under "
                f"{self.path_prefix} are taken; raise path_length"
            )
        path = generate_random_path(self.path_prefix, length)
        while path in self.paths_created:
            path = generate_random_path(self.path_prefix, length)
        self.paths_created.add(path)

        data = generate_random_data(self.data_size) if self.data_size else b""
        return Create(path, data, self.default_acls, PERSISTENT)


class GetRequestGenerator(RequestGenerator):
    def __init__(
        self,
        path_prefix: str = "/get_generator",
        num_nodes: int | None = None,
        nodes_data_size: int | None = None,
        seed: int | None = None,
    ) -> None:
        super().__init__()
        self.path_prefix = validate_path(path_prefix)
        self.num_nodes = num_nodes
        self.nodes_data_size = nodes_data_size
        _check_name_space(num_nodes, DEFAULT_NAME_LENGTH, self.path_prefix)
        self.paths_to_get: list[str] = []
        self._rng = random.Random(seed)

    def startup(self, client: KazooClient) -> None:
        with _bootstrap(self):
            if self.num_nodes is None:
                children = client.get_children(self.path_prefix)
                self.paths_to_get = [
                    _child_path(self.path_prefix, child) for child in sorted(children)
                ]
            else:
                self._create_nodes(client)

        if not self.paths_to_get:
            raise GeneratorStartupError(f"no nodes to get under {self.path_prefix}")
        LOGGER.info(
            "Get generator will read %d node(s) under %s",
            len(self.paths_to_get),
            self.path_prefix,
        )

    def _create_nodes(self, client: KazooClient) -> None:
        ensure_node(client, self.path_prefix, self.default_acls)
        data = generate_random_data(self.nodes_data_size or 0)
        seen: set[str] = set()
        for _ in range(self.num_nodes):
            path = generate_random_path(self.path_prefix)
            while path in seen:
                path = generate_random_path(self.path_prefix)
            seen.add(path)
            try:
                client.create(path, data, acl=list(self.default_acls))
            except NodeExistsError:
                LOGGER.debug("Reusing existing node %s", path)
            self.paths_to_get.append(path)

    def generate(self) -> GetData:
        if not self.paths_to_get:
            raise GeneratorStartupError(
                f"no nodes to get under {self.path_prefix}; was startup() run?"
            )
        index = self._rng.randint(0, len(self.paths_to_get) - 1)
        return GetData(self.paths_to_get[index], None)


class ListRequestGenerator(RequestGenerator):
    def __init__(
        self,
        path_prefix: str = "/list_generator",
        num_nodes: int | None = None,
        paths_length: int | None = None,
    ) -> None:
        super().__init__()
        self.path_prefix = validate_path(path_prefix)
        self.num_nodes = num_nodes
        self.paths_length = paths_length
        _check_name_space(num_nodes, paths_length or DEFAULT_NAME_LENGTH, self.path_prefix)

    def startup(self, client: KazooClient) -> None:
        if self.num_nodes is None:
            return

        length = self.paths_length or DEFAULT_NAME_LENGTH
        created = 0
        with _bootstrap(self):
            ensure_node(client, self.path_prefix, self.default_acls)
            seen: set[str] = set()
            for _ in range(self.num_nodes):
                path = generate_random_path(self.path_prefix, length)
                while path in seen:
                    path = generate_random_path(self.path_prefix, length)
                seen.add(path)
                if ensure_node(client, path, self.default_acls):
                    created += 1
        LOGGER.info("List generator prepared %d child node(s) under %s", created, self.path_prefix)

    def generate(self) -> GetChildren:
        return GetChildren(self.path_prefix, None)


class SetRequestGenerator(RequestGenerator):
    def __init__(self, path_prefix: str = "/set_generator", data_size: int = 5) -> None:
        super().__init__()
        self.path_prefix = validate_path(path_prefix)
        self.data_size = data_size

    def startup(self, client: KazooClient) -> None:
        with _bootstrap(self):
            ensure_node(client, self.path_prefix, self.default_acls)

    def generate(self) -> SetData:
        return SetData(self.path_prefix, generate_random_data(self.data_size), ANY_VERSION)


class MixedRequestGenerator(RequestGenerator):
    """Picks one child generator uniformly at random for every request."""

    def __init__(self, generators: Sequence[RequestGenerator]) -> None:
        super().__init__()
        if not generators:
            raise GeneratorConfigError("mixed generator needs at least one child generator")
        self.generators = tuple(generators)

    def startup(self, client: KazooClient) -> None:
        for generator in self.generators:
            generator.startup(client)
        LOGGER.info("Started %d child generator(s)", len(self.generators))

    def generate(self) -> Request:
        index = random.randrange(len(self.generators))
        return self.generators[index].generate()


def _child_path(parent: str, name: str) -> str:
    return f"{parent.rstrip('/')}/{name}"


def _check_name_space(num_nodes: int | None, length: int, prefix: str) -> None:
    if num_nodes is not None and num_nodes > name_space_size(length):
        raise GeneratorConfigError(
            f"cannot name {num_nodes} distinct children of {prefix} with {length} character(s)"
        )
