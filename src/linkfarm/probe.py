"""
probe.py

Decides whether a directory tree holds any real content when links are
followed.
"""
import errno
import os
import stat
from pathlib import Path

from linkfarm.errors import CycleDetectedError
from linkfarm.logging_config import get_logger

logger = get_logger("probe")

DEFAULT_MAX_DEPTH = 64


def _raise(err: OSError) -> None:
    raise err


def _is_regular_file(path: str) -> bool:
    try:
        return stat.S_ISREG(os.stat(path).st_mode)
    except FileNotFoundError:
        # dangling link
        return False
    except OSError as err:
        if err.errno == errno.ELOOP:
            return False
        raise


def _contains_regular_file(root: Path, max_depth: int) -> bool:
    root_depth = str(root).rstrip(os.sep).count(os.sep)
    visited = {os.path.realpath(root)}

    for r, d, f in os.walk(root, followlinks=True, onerror=_raise):
        if any(_is_regular_file(os.path.join(r, ff)) for ff in f):
            return True

        keep = []
        for dd in d:
            real = os.path.realpath(os.path.join(r, dd))
            if real in visited:
                logger.debug("skipping revisit of %s via %s", real, os.path.join(r, dd))
                continue
            visited.add(real)
            keep.append(dd)
        if keep and r.rstrip(os.sep).count(os.sep) - root_depth >= max_depth:
            raise CycleDetectedError(f"{root} is deeper than {max_depth} levels")
        d[:] = keep

    return False


def is_effectively_empty(path: Path, max_depth: int = DEFAULT_MAX_DEPTH) -> bool:
    """
    Returns True when `path` is absent, or is a directory in which no
    regular file can be reached by following links.

    Directories already seen under another name, dangling links and link
    loops end their branch and count as empty. A tree deeper than
    `max_depth` is reported as not empty.

    Parameters
    ----------
    path : Path
        Directory to probe
    max_depth : int
        Maximum number of directory levels to descend
    """

    path = Path(path)
    if not path.exists():
        return True
    if not path.is_dir():
        return not path.is_file()

    try:
        return not _contains_regular_file(path, max_depth)
    except CycleDetectedError as err:
        logger.debug("%s, treating as not empty", err)
        return False
