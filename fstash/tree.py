"""Walking, copying and template expansion of directory trees.

A tree is a ``dict`` mapping a directory path relative to the walked root
(``"."`` for the root itself) to the names of the files directly inside it.
Every walked subdirectory has a key, possibly with an empty list.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Union

import fs as pyfs
from fs.base import FS
from fs.copy import copy_file
from fs.enums import ResourceType
from fs.errors import ResourceNotFound
from fs.permissions import Permissions
from fs.walk import Walker

from . import template
from . import utils as u
from .config import DEFAULT_DMODE


logger = logging.getLogger(__name__)

Tree = Dict[str, List[str]]
Root = Union[FS, str]

ROOT_KEY = "."


class TreeWalker(Walker):
    """Walker that prunes directories by exact name and does not descend into
    symlinked directories, so link cycles end the walk instead of looping.

    Args:
        skip_dirs (iterable): Directory names that are neither recorded nor
            descended into, wherever they appear.
    """

    def __init__(self, skip_dirs: Iterable[str] = (), **kwargs):
        super().__init__(**kwargs)
        self.skip_dirs = frozenset(skip_dirs)

    def check_open_dir(self, fs, path, info):
        return info.name not in self.skip_dirs

    def check_scan_dir(self, fs, path, info):
        return not (info.has_namespace("link") and info.is_link)


def tree_key(path: str) -> str:
    """Convert an absolute filesystem path into its tree key."""
    return pyfs.path.relpath(pyfs.path.normpath(path)) or ROOT_KEY


def _is_regular_file(src_fs: FS, path: str) -> bool:
    """Return whether `path` resolves to a regular file. FIFOs, sockets,
    devices and dangling symlinks are not.
    """
    try:
        regular = src_fs.gettype(path) is ResourceType.file
    except ResourceNotFound:
        regular = False

    if not regular:
        logger.debug("skipping %s: not a regular file", path)

    return regular


def walk_tree(source: Root, skip_dirs: Iterable[str] = ()) -> Tree:
    """Enumerate `source` into a tree. Only regular files, or symlinks to
    them, are listed.

    Raises:
        SourceNotFound: If `source` does not exist.
    """
    tree = {}
    walker = TreeWalker(skip_dirs)

    with u.opened(source) as src_fs:
        for step in walker.walk(src_fs, namespaces=["link"]):
            names = [info.name
                     for info in step.files
                     if _is_regular_file(src_fs, pyfs.path.join(step.path, info.name))]
            if names:
                tree.setdefault(tree_key(step.path), []).extend(names)

            for info in step.dirs:
                tree.setdefault(tree_key(pyfs.path.join(step.path, info.name)), [])

    return tree


def _materialize(tree: Tree, dst_fs: FS, dmode: int) -> Iterator[str]:
    """Create every directory of `tree` under `dst_fs` and yield the relative
    path of each file to write.
    """
    perms = Permissions.create(dmode)

    for key in sorted(tree):
        if key != ROOT_KEY:
            dst_fs.makedirs(key, permissions=perms, recreate=True)

        for name in tree[key]:
            yield pyfs.path.join(key, name)


def copy_tree(tree: Tree,
              source: Root,
              dest: Root,
              dmode: int = DEFAULT_DMODE) -> int:
    """Copy every file of `tree` from `source` to `dest`, overwriting files
    that already exist. `dest` is created if missing.

    Returns:
        int: Number of files copied.
    """
    count = 0

    with u.opened(source) as src_fs, u.opened(dest, create=True) as dst_fs:
        for path in _materialize(tree, dst_fs, dmode):
            copy_file(src_fs, path, dst_fs, path)
            logger.debug("copied %s", path)
            count += 1

    return count


def expand_tree(tree: Tree,
                source: Root,
                dest: Root,
                template_data: Optional[Mapping[str, str]],
                strict: bool = False,
                dmode: int = DEFAULT_DMODE) -> int:
    """Copy `tree` like :func:`copy_tree`, rendering each file whose stem has
    an entry in `template_data` as a template against that entry's JSON
    object. Files without an entry, or with a blank one, are copied verbatim.

    Returns:
        int: Number of files written.

    Raises:
        TemplateDataError: If an entry is not a JSON object.
        TemplateSyntaxError: If a file is not a valid template.
        TemplateRenderError: If rendering a file fails.
    """
    env = template.make_environment(strict)
    count = 0

    with u.opened(source) as src_fs, u.opened(dest, create=True) as dst_fs:
        for path in _materialize(tree, dst_fs, dmode):
            raw = template.lookup(template_data, path)

            if raw:
                content = template.render(src_fs.readbytes(path), raw, path, env)
                dst_fs.writebytes(path, content)
                logger.debug("rendered %s", path)
            else:
                copy_file(src_fs, path, dst_fs, path)
                logger.debug("copied %s", path)

            count += 1

    return count


def list_depth(root: Root, depth: int) -> List[str]:
    """Return the names of the directories exactly `depth` levels below
    `root`, ordered by their full path. A `depth` of ``0`` or less yields
    nothing.
    """
    if depth <= 0:
        return []

    with u.opened(root) as root_fs:
        paths = [path
                 for path in root_fs.walk.dirs(max_depth=depth)
                 if len(pyfs.path.iteratepath(path)) == depth]

    return [pyfs.path.basename(path) for path in sorted(paths)]
