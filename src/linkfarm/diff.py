"""
diff.py

One level comparison of a source directory against its mirror. Only
content the mirror lacks is reported, never the other way round.
"""
import os
from pathlib import Path
from typing import Iterator

from linkfarm.logging_config import get_logger
from linkfarm.paths import rebase
from linkfarm.probe import DEFAULT_MAX_DEPTH, is_effectively_empty

logger = get_logger("diff")


def iter_unmirrored_entries(
    source_dir: Path, mirror_dir: Path, max_depth: int = DEFAULT_MAX_DEPTH
) -> Iterator[Path]:
    """
    Yields each immediate child of `source_dir` that has no counterpart in
    `mirror_dir` and is either a regular file or a directory with content.
    Empty directories without a counterpart are not reported.
    """

    source_dir = Path(source_dir)
    mirror_dir = Path(mirror_dir)
    if not source_dir.exists():
        return

    with os.scandir(source_dir) as entries:
        for entry in entries:
            child = Path(entry.path)
            counterpart = rebase(child, source_dir, mirror_dir)
            if counterpart.exists():
                continue

            if child.is_file():
                logger.debug("%s has no counterpart %s", child, counterpart)
                yield child
            elif child.is_dir() and not is_effectively_empty(child, max_depth=max_depth):
                logger.debug("%s has content and no counterpart %s", child, counterpart)
                yield child


def has_unmirrored_entries(
    source_dir: Path, mirror_dir: Path, max_depth: int = DEFAULT_MAX_DEPTH
) -> bool:
    """True as soon as one child of `source_dir` is missing from `mirror_dir`"""
    return next(iter_unmirrored_entries(source_dir, mirror_dir, max_depth), None) is not None
