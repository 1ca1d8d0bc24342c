# -*- coding: utf-8 -*-
"""fstash saves named snapshots of directory trees ("stashes") under a
single home directory and expands them back into working directories,
optionally rendering files as templates on the way out.

Typical use cases:

- Project skeletons that are copied out over and over again.
- Config file sets where a few values change per checkout.
- Parking a scratch directory by name before wiping it.
"""

from .__meta__ import (
    __title__,
    __summary__,
    __url__,
    __version__,
    __author__,
    __email__,
    __license__,
)

from .exceptions import (
    FStashError,
    InvalidName,
    SourceNotFound,
    StashNotExist,
    TemplateError,
    TemplateDataError,
    TemplateSyntaxError,
    TemplateRenderError,
)
from .fstash import FStash, StashAddress, create, expand, delete, list_stashes
from .tree import walk_tree, copy_tree, expand_tree, list_depth


__all__ = (
    "FStash",
    "StashAddress",
    "create",
    "expand",
    "delete",
    "list_stashes",
    "walk_tree",
    "copy_tree",
    "expand_tree",
    "list_depth",
    "FStashError",
    "InvalidName",
    "SourceNotFound",
    "StashNotExist",
    "TemplateError",
    "TemplateDataError",
    "TemplateSyntaxError",
    "TemplateRenderError",
)
