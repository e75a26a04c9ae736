"""
symlinks.py

Finds the links in a mirror directory that point beneath a source location.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from linkfarm.logging_config import get_logger
from linkfarm.paths import is_under

logger = get_logger("symlinks")


@dataclass(frozen=True, slots=True)
class SymlinkRecord:
    """
    A symbolic link found on disk

    - src - raw target stored in the link, never resolved
    - dst - location of the link itself
    """

    src: Path
    dst: Path

    def __str__(self) -> str:
        return f"{self.dst} -> {self.src}"


def _raise(err: OSError) -> None:
    raise err


def _record_if_matches(path: Path, prefix: Path, found: List[SymlinkRecord]) -> None:
    if not path.is_symlink():
        return
    target = Path(os.readlink(path))
    if is_under(target, prefix):
        logger.debug("%s -> %s is under %s", path, target, prefix)
        found.append(SymlinkRecord(src=target, dst=path))


def find_links_with_prefix(dir: Path, prefix: Path) -> List[SymlinkRecord]:
    """
    Walks `dir` without following links and returns every link whose stored
    target starts with `prefix`. A missing `dir` yields an empty list, any
    other filesystem error aborts the walk.

    Parameters
    ----------
    dir : Path
        Root of the walk, usually a mirror directory
    prefix : Path
        Target prefix to match component-wise
    """

    dir = Path(dir)
    prefix = Path(prefix)
    found: List[SymlinkRecord] = []

    if not dir.exists():
        return found

    _record_if_matches(dir, prefix, found)
    if not dir.is_dir():
        return found
    for r, d, f in os.walk(dir, followlinks=False, onerror=_raise):
        for name in d + f:
            _record_if_matches(Path(r).joinpath(name), prefix, found)

    return found
