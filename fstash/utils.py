# -*- coding: utf-8 -*-


"""
common utils for fstash
"""


import re
from contextlib import closing, contextmanager
from typing import Iterator, List, Union

import fs as pyfs
from fs.errors import CreateFailed
from fs.base import FS
from fs.osfs import OSFS

from .config import SHARD_DEPTH
from .exceptions import InvalidName, SourceNotFound


FNV64_OFFSET = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3

NAME_RE = re.compile(r"[a-zA-Z0-9_-]+")


def compact(items):
    """Return only truthy elements of `items`."""
    return [item for item in items if item]


def normalize_name(name: str) -> str:
    """Lowercase `name` and strip surrounding whitespace."""
    return name.lower().strip()


def validate_name(name: str) -> bool:
    """Return whether `name` consists only of letters, digits, ``-`` and
    ``_``.
    """
    return NAME_RE.fullmatch(name) is not None


def check_name(name: str) -> str:
    """Normalize `name`, raising :class:`InvalidName` if the result is not a
    valid stash name.
    """
    normalized = normalize_name(name)
    if not validate_name(normalized):
        raise InvalidName(name)
    return normalized


def fnv1a_64(data: bytes) -> int:
    """64-bit FNV-1a hash of `data`."""
    h = FNV64_OFFSET
    for byte in data:
        h ^= byte
        h = (h * FNV64_PRIME) & 0xFFFFFFFFFFFFFFFF
    return h


def fold(digest: int) -> bytes:
    """Fold a 64-bit digest to 4 bytes by XORing its halves."""
    return ((digest >> 32) ^ (digest & 0xFFFFFFFF)).to_bytes(4, "big")


def shard_key(name: str) -> List[str]:
    """Return the shard directories for an already normalized `name`."""
    # Changing this mapping orphans every existing stash.
    return ["{0:02X}".format(b) for b in fold(fnv1a_64(name.encode("utf8")))]


def shard(name: str, depth: int = SHARD_DEPTH) -> List[str]:
    """Shard `name` into `depth` hex subfolders followed by the name itself."""
    return compact(shard_key(name)[:depth] + [name])


def derive(name: str) -> str:
    """Build the storage path, relative to the stash home, of the stash
    called `name`. The name is normalized but not validated.
    """
    return pyfs.path.join(*shard(normalize_name(name)))


def load_fs(root: Union[FS, str], create: bool = False) -> FS:
    """Return `root` if it is already a filesystem, otherwise open the OS
    directory it names. Raises ``fs.errors.CreateFailed`` when the directory
    is missing and `create` is off.
    """
    if isinstance(root, FS):
        return root
    return OSFS(root, create=create)


@contextmanager
def opened(root: Union[FS, str], create: bool = False) -> Iterator[FS]:
    """Context manager yielding the filesystem for `root`. Filesystems opened
    here are closed on exit; a passed in filesystem is left open for the
    caller to close.

    Raises:
        SourceNotFound: If `root` names a missing directory and `create` is
            off.
    """
    if isinstance(root, FS):
        yield root
        return

    try:
        filesystem = load_fs(root, create=create)
    except CreateFailed as exc:
        if create:
            raise
        raise SourceNotFound(root) from exc

    with closing(filesystem):
        yield filesystem
