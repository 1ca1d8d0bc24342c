"""Module for FStash class."""

import logging
from collections import namedtuple
from contextlib import closing
from typing import Iterable, Iterator, List, Mapping, Optional, Union

import fs as pyfs
from fs.base import FS
from fs.errors import ResourceNotFound
from fs.permissions import Permissions
from fs.tools import remove_empty

from . import tree as t
from . import utils as u
from .config import DEFAULT_DMODE, DEFAULT_SKIP_DIRS, SHARD_DEPTH
from .exceptions import StashNotExist


logger = logging.getLogger(__name__)


class StashAddress(namedtuple("StashAddress", ["name", "relpath", "abspath"])):
    """Location of a stash: its normalized name, its path relative to the
    stash home and its absolute path on disk (``None`` when the home is not
    an OS directory).
    """


class FStash(object):
    """Named directory snapshot manager. Each stash lives at a path derived
    purely from its name, four hex shard levels below :attr:`fs`::

        <home>/3F/0A/9C/E1/<name>/...

    There is no index; a stash exists exactly when its directory does.

    Attributes:
        root: Directory path or PyFilesystem2 filesystem used as the stash
            home. A directory path is created if missing.
        dmode (int, optional): Directory mode permission to set for
            directories created in the home or while expanding. Defaults to
            ``0o777``, subject to the process umask.
        skip_dirs (iterable, optional): Directory names left out when
            creating a stash. Defaults to ``(".git",)``.
    """

    def __init__(self,
                 root: Union[FS, str],
                 dmode: int = DEFAULT_DMODE,
                 skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS):
        self.fs = u.load_fs(root, create=True)
        self._owns_fs = not isinstance(root, FS)
        self.dmode = dmode
        self.skip_dirs = tuple(skip_dirs)

    def create(self,
               name: str,
               source: Union[FS, str],
               replace: bool = False) -> StashAddress:
        """Save the tree at `source` as the stash `name`.

        An existing stash of the same name is overwritten file by file; files
        it holds that `source` no longer has are kept unless `replace` is set,
        in which case the old stash is deleted first.

        Args:
            name: Stash name. Normalized before use.
            source: Directory to snapshot.
            replace: Delete any existing stash of that name first.

        Returns:
            StashAddress: Where the stash was written.

        Raises:
            InvalidName: If the normalized name is not valid. Nothing is
                written in that case.
            SourceNotFound: If `source` does not exist.
        """
        address = self._address(u.check_name(name))
        tree = t.walk_tree(source, self.skip_dirs)

        if replace:
            self.delete(address.name)

        self._makedirs(address.relpath)
        with self.fs.opendir(address.relpath) as dest:
            count = t.copy_tree(tree, source, dest, dmode=self.dmode)

        logger.info("created stash %s (%d files)", address.name, count)

        return address

    def expand(self,
               name: str,
               dest: Union[FS, str],
               template_data: Optional[Mapping[str, str]] = None,
               strict: bool = False) -> StashAddress:
        """Write the contents of stash `name` into `dest`, overwriting
        existing files.

        Files whose base name without extension is a key of `template_data`
        are rendered as templates against the JSON object stored under that
        key. All files are copied verbatim when `template_data` is empty.

        Args:
            name: Stash name. Normalized before use.
            dest: Directory to expand into. Created if missing.
            template_data: Mapping of file stem to JSON object text.
            strict: Fail on template fields missing from the data instead of
                rendering them empty.

        Returns:
            StashAddress: Where the stash was read from.

        Raises:
            InvalidName: If the normalized name is not valid.
            StashNotExist: If there is no stash called `name`.
            TemplateError: If rendering a file fails.
        """
        address = self._address(u.check_name(name))

        if not self.fs.isdir(address.relpath):
            raise StashNotExist(address.name)

        with self.fs.opendir(address.relpath) as source:
            tree = t.walk_tree(source)

            if template_data:
                count = t.expand_tree(
                    tree, source, dest, template_data, strict=strict, dmode=self.dmode
                )
            else:
                count = t.copy_tree(tree, source, dest, dmode=self.dmode)

        logger.info("expanded stash %s (%d files)", address.name, count)

        return address

    def delete(self, name: str) -> bool:
        """Delete stash `name` along with any shard directories it leaves
        empty. No exception is raised if the stash doesn't exist.
        Invalid names raise :class:`InvalidName` before anything is touched.

        Returns:
            bool: Whether a stash was removed.
        """
        address = self._address(u.check_name(name))

        if not self.fs.isdir(address.relpath):
            return False

        self.fs.removetree(address.relpath)
        self._remove_empty(pyfs.path.dirname(address.relpath))

        logger.info("deleted stash %s", address.name)

        return True

    def list(self, depth: int) -> List[str]:
        """Return the names of the directories `depth` levels below the home.
        Depths ``1`` through ``4`` list shard directories, ``5`` lists stash
        names.
        """
        return t.list_depth(self.fs, depth)

    def names(self) -> List[str]:
        """Return the names of all stashes."""
        return self.list(SHARD_DEPTH + 1)

    def get(self, name: str) -> Optional[StashAddress]:
        """Return the :class:`StashAddress` of stash `name`, or ``None`` if it
        doesn't exist.
        """
        normalized = u.normalize_name(name)
        if not u.validate_name(normalized):
            return None

        address = self._address(normalized)

        if not self.fs.isdir(address.relpath):
            return None

        return address

    def exists(self, name: str) -> bool:
        """Check whether stash `name` exists on disk."""
        return self.get(name) is not None

    def stash_path(self, name: str) -> Optional[str]:
        """Return the absolute system path stash `name` has or would have."""
        return self._address(u.check_name(name)).abspath

    def close(self) -> None:
        """Close the underlying filesystem if it was opened from a path."""
        if self._owns_fs:
            self.fs.close()

    def __contains__(self, name: str) -> bool:
        """Return whether stash `name` exists."""
        return self.exists(name)

    def __iter__(self) -> Iterator[str]:
        """Iterate over all stash names."""
        return iter(self.names())

    def __len__(self) -> int:
        """Return the number of stashes."""
        return len(self.names())

    def _address(self, name: str) -> StashAddress:
        relpath = u.derive(name)
        abspath = self.fs.getsyspath(relpath) if self.fs.hassyspath("/") else None
        return StashAddress(name, relpath, abspath)

    def _makedirs(self, dir_path: str) -> None:
        """Physically create the folder path on disk."""
        perms = Permissions.create(self.dmode)
        self.fs.makedirs(dir_path, permissions=perms, recreate=True)

    def _remove_empty(self, path: str) -> None:
        """Successively remove all empty folders starting with `path` and
        proceeding "up" through directory tree until reaching the root.
        """
        try:
            remove_empty(self.fs, path)
        except ResourceNotFound:
            # Guard against paths that don't exist in the FS.
            return None


def create(name: str, source: Union[FS, str], home: Union[FS, str],
           replace: bool = False) -> StashAddress:
    """Save `source` as stash `name` under `home`."""
    u.check_name(name)
    with closing(FStash(home)) as stash:
        return stash.create(name, source, replace=replace)


def expand(name: str, home: Union[FS, str], dest: Union[FS, str],
           template_data: Optional[Mapping[str, str]] = None,
           strict: bool = False) -> StashAddress:
    """Expand stash `name` under `home` into `dest`."""
    u.check_name(name)
    with closing(FStash(home)) as stash:
        return stash.expand(name, dest, template_data, strict=strict)


def delete(name: str, home: Union[FS, str]) -> bool:
    """Delete stash `name` under `home` if it exists."""
    u.check_name(name)
    with closing(FStash(home)) as stash:
        return stash.delete(name)


def list_stashes(home: Union[FS, str], depth: int = SHARD_DEPTH + 1) -> List[str]:
    """List directory names `depth` levels below `home`."""
    return t.list_depth(home, depth)
