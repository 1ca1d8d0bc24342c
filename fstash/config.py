"""Defaults and environment lookup for fstash."""

import os
from typing import Optional


HOME_ENVVAR = "FSTASH_HOME"
DEFAULT_HOME = os.path.join("~", ".fstash")

#: Directory names never copied into a stash.
DEFAULT_SKIP_DIRS = (".git",)

#: Number of hex shard levels between the home and a stash directory.
SHARD_DEPTH = 4

#: Mode for directories fstash creates (umask applies).
DEFAULT_DMODE = 0o777


def resolve_home(home: Optional[str] = None) -> str:
    """Return the stash home: `home` if given, else ``$FSTASH_HOME``, else
    ``~/.fstash``. User and environment references are expanded.
    """
    if not home:
        home = os.environ.get(HOME_ENVVAR) or DEFAULT_HOME
    return os.path.abspath(os.path.expandvars(os.path.expanduser(home)))
