import logging
import os
from pathlib import Path

import pytest


@pytest.fixture
def source(tmp_path: Path) -> Path:
    """source tree with src/app/{a.txt, sub/x.txt}"""

    app = tmp_path.joinpath("src", "app")
    app.joinpath("sub").mkdir(parents=True)
    app.joinpath("a.txt").write_text("a")
    app.joinpath("sub", "x.txt").write_text("x")
    return tmp_path.joinpath("src")


@pytest.fixture
def mirror(tmp_path: Path, source: Path) -> Path:
    """mirror tree holding a single directory link mirror/app -> src/app"""

    root = tmp_path.joinpath("mirror")
    root.mkdir()
    os.symlink(source.joinpath("app"), root.joinpath("app"))
    return root


@pytest.fixture
def restore_logger():
    """put the linkfarm logger back the way it was"""

    logger = logging.getLogger("linkfarm")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
