from __future__ import annotations

import random
import string

ALPHABET = string.ascii_letters + string.digits
DEFAULT_NAME_LENGTH = 5


def name_space_size(length: int) -> int:
    """Number of distinct child names of ``length`` characters."""
    return len(ALPHABET) ** length


def generate_random_path(
    prefix: str, length: int = DEFAULT_NAME_LENGTH, rng: random.Random | None = None
) -> str:
    if length < 1:
        raise ValueError(f"path name length must be >= 1, got {length}")
    source = rng or random
    name = "".join(source.choices(ALPHABET, k=length))
    return f"{prefix.rstrip('/')}/{name}"


def generate_random_data(size: int, rng: random.Random | None = None) -> bytes:
    if size < 0:
        raise ValueError(f"payload size must be >= 0, got {size}")
    if size == 0:
        return b""
    source = rng or random
    return "".join(source.choices(ALPHABET, k=size)).encode("ascii")


def validate_path(path: str) -> str:
    """Return ``path`` unchanged if it is a valid absolute node path."""

    if not path or not path.startswith("/"):
        raise ValueError(f"node path must be absolute, got {path!r}")
    if path == "/":
        return path
    if path.endswith("/"):
        raise ValueError(f"node path must not end with '/', got {path!r}")
    if "" in path[1:].split("/"):
        raise ValueError(f"node path has an empty component: {path!r}")
    return path
