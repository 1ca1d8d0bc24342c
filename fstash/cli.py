"""fstash CLI: save, expand, delete and list stashes."""

import logging
from contextlib import contextmanager

import click
from fs.errors import FSError

from .config import HOME_ENVVAR, SHARD_DEPTH, resolve_home
from .exceptions import FStashError
from .fstash import FStash
from .utils import check_name


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_assignment(raw: str, option: str):
    """Split a ``STEM=VALUE`` option value."""
    stem, sep, value = raw.partition("=")
    if not sep or not stem:
        raise click.BadParameter(f"expected STEM=VALUE, got {raw!r}", param_hint=option)
    return stem, value


def _template_data(data, data_files) -> dict:
    """Build the template data mapping from --data and --data-file values."""
    result = {}
    for raw in data:
        stem, value = _parse_assignment(raw, "--data")
        result[stem] = value
    for raw in data_files:
        stem, path = _parse_assignment(raw, "--data-file")
        try:
            with open(path, encoding="utf8") as f:
                result[stem] = f.read()
        except OSError as exc:
            raise click.ClickException(f"Cannot read template data {path}: {exc.strerror}")
    return result


@contextmanager
def _open_stash(ctx, name=None):
    """Open the stash home and turn library errors into CLI errors. `name`, if
    given, is validated before the home is touched.
    """
    stash = None
    try:
        if name is not None:
            check_name(name)
        stash = FStash(ctx.obj["home"])
        yield stash
    except (FStashError, FSError) as exc:
        raise click.ClickException(str(exc))
    finally:
        if stash is not None:
            stash.close()


def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--home", type=click.Path(file_okay=False), envvar=HOME_ENVVAR,
              help=f"Stash home directory (or set {HOME_ENVVAR}; default ~/.fstash).")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.version_option(package_name="fstash")
@click.pass_context
def main(ctx, home, verbose):
    """fstash: named snapshots of directory trees.

    \b
    Quick start:
      fstash create skeleton ./my-project
      fstash expand skeleton ./new-project --data config='{"port": 8080}'
      fstash list
      fstash delete skeleton
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["home"] = resolve_home(home)
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@main.command()
@click.argument("name")
@click.argument("source", default=".", type=click.Path(file_okay=False))
@click.option("--replace", is_flag=True,
              help="Delete an existing stash of the same name first.")
@click.pass_context
def create(ctx, name, source, replace):
    """Save SOURCE (default: current directory) as stash NAME.

    .git directories are never stashed.
    """
    with _open_stash(ctx, name) as stash:
        address = stash.create(name, source, replace=replace)
    _status(ctx, f"Stashed {source} as {address.name} in {address.abspath}")


@main.command()
@click.argument("name")
@click.argument("dest", default=".", type=click.Path(file_okay=False))
@click.option("--data", "data", multiple=True, metavar="STEM=JSON",
              help="JSON object to render files named STEM.* with. Repeatable.")
@click.option("--data-file", "data_files", multiple=True, metavar="STEM=PATH",
              help="Like --data, reading the JSON object from PATH. Repeatable.")
@click.option("--strict", is_flag=True,
              help="Fail on template fields missing from the data.")
@click.pass_context
def expand(ctx, name, dest, data, data_files, strict):
    """Write stash NAME into DEST (default: current directory).

    Existing files are overwritten.
    """
    template_data = _template_data(data, data_files)
    with _open_stash(ctx, name) as stash:
        address = stash.expand(name, dest, template_data, strict=strict)
    _status(ctx, f"Expanded {address.name} into {dest}")


@main.command()
@click.argument("name")
@click.pass_context
def delete(ctx, name):
    """Delete stash NAME. Deleting a missing stash is not an error."""
    with _open_stash(ctx, name) as stash:
        removed = stash.delete(name)
    _status(ctx, f"Deleted {name}" if removed else f"No stash named {name}")


@main.command("list")
@click.option("--depth", type=int, default=SHARD_DEPTH + 1, show_default=True,
              help="Directory depth below the home to list; the default lists stash names.")
@click.pass_context
def list_(ctx, depth):
    """List stash names."""
    with _open_stash(ctx) as stash:
        for name in stash.list(depth):
            click.echo(name)
