from __future__ import annotations

import logging
import os
import time
from typing import Sequence

from kazoo.client import KazooClient
from kazoo.exceptions import NodeExistsError
from kazoo.handlers.threading import KazooTimeoutError
from kazoo.security import ACL

LOGGER = logging.getLogger("keeper_bench.client")

DEFAULT_HOSTS = "localhost:2181"


class KeeperConnectionError(RuntimeError):
    """Raised when no coordination-service session could be established."""


def connect(
    hosts: str | None = None,
    timeout: float = 10.0,
    deadline_s: float = 60.0,
) -> KazooClient:
    hosts = hosts or os.environ.get("ZOOKEEPER_HOSTS", DEFAULT_HOSTS)
    backoff = 1.0
    max_backoff = 10.0
    deadline = time.time() + deadline_s

    while True:
        client = KazooClient(hosts=hosts)
        try:
            client.start(timeout=timeout)
            LOGGER.info("Connected to coordination service at %s", hosts)
            return client
        except KazooTimeoutError as exc:
            if time.time() >= deadline:
                raise KeeperConnectionError(
                    f"failed to connect to {hosts} within {deadline_s:.0f} seconds"
                ) from exc

            LOGGER.warning("Connection to %s timed out, retrying in %.1fs", hosts, backoff)
            time.sleep(backoff)
            backoff = min(backoff * 1.5, max_backoff)


def ensure_node(
    client: KazooClient,
    path: str,
    acl: Sequence[ACL],
    data: bytes = b"",
) -> bool:
    """Create ``path`` (and missing parents) unless it already exists.

    Returns True when the node was created by this call.
    """
    try:
        client.create(path, data, acl=list(acl), makepath=True)
    except NodeExistsError:
        LOGGER.debug("Node %s already exists", path)
        return False
    return True
