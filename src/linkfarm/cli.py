from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import click

from linkfarm import __version__
from linkfarm.config import Config
from linkfarm.diff import iter_unmirrored_entries
from linkfarm.errors import InvalidPathError, LinkFarmError
from linkfarm.logging_config import setup_logging
from linkfarm.paths import expand_path
from linkfarm.probe import is_effectively_empty
from linkfarm.symlinkmirror import expand as expand_link
from linkfarm.symlinkmirror import link_mirror, retarget_links
from linkfarm.symlinks import find_links_with_prefix

CONFIG: Optional[Config] = None


class ExpandedPath(click.ParamType):
    """Path argument with environment variables and ~ expanded"""

    name = "path"

    def convert(self, value, param, ctx) -> Path:
        if isinstance(value, Path):
            return value
        try:
            return expand_path(value)
        except InvalidPathError as err:
            self.fail(str(err), param, ctx)


PATH = ExpandedPath()


def _config() -> Config:
    """Loads the config on first use, a bad config file ends the command with an error"""
    global CONFIG
    if CONFIG is None:
        try:
            CONFIG = Config()
        except (LinkFarmError, ValueError, OSError) as err:
            raise click.ClickException(f"could not load config: {err}") from err
    return CONFIG


@contextmanager
def _reported() -> Iterator[None]:
    try:
        yield
    except (LinkFarmError, OSError) as err:
        raise click.ClickException(str(err)) from err


@click.version_option(version=__version__)
@click.group()
@click.option("-v", "--verbose", count=True, help="-v for progress, -vv for debugging output.")
def cli(verbose: int) -> None:
    """Maintain a mirror tree of symbolic links over a source tree."""
    conf = _config()
    level = {0: conf.log_level, 1: "INFO"}.get(verbose, "DEBUG")
    setup_logging(level=level, log_file=conf.log_file)


@cli.command()
def config() -> None:
    """
    Show the linkfarm configuration
    """
    click.echo(_config())


@cli.command()
@click.argument("src", type=PATH)
@click.argument("dst", type=PATH)
def link(src: Path, dst: Path) -> None:
    """
    Link DST to the source directory SRC as a single directory link.
    """
    with _reported():
        record = link_mirror(src, dst)
    click.echo(record)


@cli.command()
@click.argument("path", type=PATH)
@click.option(
    "--staged/--in-place",
    default=None,
    help="Swap the new directory in with renames, or rebuild in place. Defaults to the config.",
)
def expand(path: Path, staged: Optional[bool]) -> None:
    """
    Turn the directory link PATH into a directory of links, one level deep.
    """
    if staged is None:
        staged = _config().staged_expand
    with _reported():
        expand_link(path, staged=staged)
    click.echo(f"expanded {path}")


@cli.command()
@click.argument("source", type=PATH, required=False)
@click.argument("mirror", type=PATH, required=False)
@click.pass_context
def status(ctx: click.Context, source: Optional[Path], mirror: Optional[Path]) -> None:
    """
    List entries of SOURCE that MIRROR does not expose. Exits with 1 when
    any are found.
    """
    conf = _config()
    source = conf.source if source is None else source
    mirror = conf.mirror if mirror is None else mirror

    with _reported():
        missing = list(iter_unmirrored_entries(source, mirror, max_depth=conf.max_depth))

    if not missing:
        click.secho(f"{mirror} is up to date with {source}", fg="green")
        return

    click.secho(f"{len(missing)} entries of {source} are not in {mirror}", fg="red")
    for entry in missing:
        click.echo(f"  {entry.name}")
    ctx.exit(1)


@cli.command()
@click.argument("directory", type=PATH)
@click.argument("prefix", type=PATH)
def find(directory: Path, prefix: Path) -> None:
    """
    Print links under DIRECTORY whose target starts with PREFIX.
    """
    with _reported():
        records = find_links_with_prefix(directory, prefix)
    for record in records:
        click.echo(record)


@cli.command()
@click.argument("path", type=PATH)
def empty(path: Path) -> None:
    """
    Report whether PATH holds no regular file, following links.
    """
    with _reported():
        is_empty = is_effectively_empty(path, max_depth=_config().max_depth)
    click.echo("empty" if is_empty else "not empty")


@cli.command()
@click.argument("directory", type=PATH)
@click.argument("old", type=PATH)
@click.argument("new", type=PATH)
def retarget(directory: Path, old: Path, new: Path) -> None:
    """
    Point links under DIRECTORY that target OLD at the same place under NEW.
    """
    with _reported():
        records = retarget_links(directory, old, new)
    for record in records:
        click.echo(record)
    click.echo(f"{len(records)} links retargeted")