"""
symlinkmirror.py

Operations that change the mirror tree:
- seed a mirror entry with a single directory link
- expand a directory link into a real directory of per-entry links
- re-point links from one source location to another

"""
import os
import shutil
import uuid
from pathlib import Path
from typing import List

from linkfarm.errors import NotASymlinkError
from linkfarm.logging_config import get_logger
from linkfarm.paths import rebase
from linkfarm.symlinks import SymlinkRecord, find_links_with_prefix

logger = get_logger("symlinkmirror")


def _sibling(path: Path, suffix: str) -> Path:
    return path.with_name(f".{path.name}.{uuid.uuid4().hex[:8]}.{suffix}")


def link_mirror(src: Path, dst: Path) -> SymlinkRecord:
    """
    Creates `dst` as a single directory level link to `src`. Missing parents
    of `dst` are created, an existing `dst` is never replaced.

    Parameters
    ----------
    src : Path
        The source directory to mirror, stored in the link as given
    dst : Path
        Location of the new link
    """

    src = Path(src)
    dst = Path(dst)

    if os.path.lexists(dst):
        raise FileExistsError(f"{dst} already exists")

    if not dst.parent.exists():
        dst.parent.mkdir(parents=True)

    dst.symlink_to(src, target_is_directory=True)
    logger.info("%s -> %s", dst, src)
    return SymlinkRecord(src=src, dst=dst)


def _populate(directory: Path, target_root: Path, children: List[str]) -> None:
    for name in children:
        link = directory.joinpath(name)
        link.symlink_to(target_root.joinpath(name))
        logger.debug("%s -> %s", link, target_root.joinpath(name))


def _expand_in_place(path: Path, target_root: Path, children: List[str]) -> None:
    # a failure past unlink leaves a partially populated directory behind
    path.unlink()
    path.mkdir(parents=True, exist_ok=True)
    _populate(path, target_root, children)


def _expand_staged(path: Path, target_root: Path, children: List[str]) -> None:
    staging = _sibling(path, "tmp")
    staging.mkdir()
    try:
        _populate(staging, target_root, children)
    except OSError:
        shutil.rmtree(staging)
        raise

    aside = _sibling(path, "old")
    try:
        os.rename(path, aside)
    except OSError:
        shutil.rmtree(staging)
        raise
    try:
        os.rename(staging, path)
    except OSError:
        os.rename(aside, path)
        shutil.rmtree(staging)
        raise
    aside.unlink()


def expand(path: Path, staged: bool = True) -> None:
    """
    Replaces the directory link at `path` with a real directory holding one
    link per entry of the old target. The entry `name` links to
    `<raw target>/name`, so subdirectories stay whole directory links.

    Parameters
    ----------
    path : Path
        A symbolic link that resolves to a directory
    staged : bool
        Build the new directory beside `path` and swap it in with renames.
        When False the link is removed first and the directory filled in
        place, and a failure part way leaves it partially filled.

    Raises
    ------
    NotASymlinkError
        `path` is not a link to a directory, e.g. it was already expanded
    """

    path = Path(path)
    if not (path.is_symlink() and path.is_dir()):
        raise NotASymlinkError(path)

    children = sorted(os.listdir(path))
    target_root = Path(os.readlink(path))

    if staged:
        _expand_staged(path, target_root, children)
    else:
        _expand_in_place(path, target_root, children)

    logger.info("expanded %s into %d links under %s", path, len(children), target_root)


def retarget_links(dir: Path, old_prefix: Path, new_prefix: Path) -> List[SymlinkRecord]:
    """
    Points every link under `dir` whose target lies beneath `old_prefix` at
    the same remainder beneath `new_prefix`. Each link is swapped with a
    rename so it is never missing. Returns the rewritten links.
    """

    retargeted = []
    for record in find_links_with_prefix(dir, old_prefix):
        target = rebase(record.src, old_prefix, new_prefix)
        replacement = _sibling(record.dst, "new")
        replacement.symlink_to(target)
        try:
            os.replace(replacement, record.dst)
        except OSError:
            replacement.unlink()
            raise
        logger.info("%s -> %s (was %s)", record.dst, target, record.src)
        retargeted.append(SymlinkRecord(src=target, dst=record.dst))

    return retargeted
