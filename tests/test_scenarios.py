import os
from pathlib import Path

from linkfarm.diff import has_unmirrored_entries
from linkfarm.probe import is_effectively_empty
from linkfarm.symlinkmirror import expand
from linkfarm.symlinks import find_links_with_prefix


class TestMirrorLifecycle:
    """expanding a mirror and keeping track of new source content"""

    @staticmethod
    def test_expand_directory_link(source: Path, mirror: Path) -> None:
        """mirror/app -> src/app becomes a directory with a.txt and sub links"""
        expand(mirror.joinpath("app"))

        app = mirror.joinpath("app")
        assert app.is_dir() and not app.is_symlink()
        assert os.readlink(app.joinpath("a.txt")) == str(source.joinpath("app", "a.txt"))
        assert os.readlink(app.joinpath("sub")) == str(source.joinpath("app", "sub"))
        assert app.joinpath("sub").is_dir()
        assert app.joinpath("sub").is_symlink()

    @staticmethod
    def test_new_source_file_detected(source: Path, mirror: Path) -> None:
        """a file added after expansion shows up as unmirrored"""
        expand(mirror.joinpath("app"))
        source.joinpath("app", "b.txt").write_text("b")

        assert sorted(os.listdir(mirror.joinpath("app"))) == ["a.txt", "sub"]
        assert has_unmirrored_entries(source.joinpath("app"), mirror.joinpath("app"))

    @staticmethod
    def test_linked_empty_subdirectory(source: Path, mirror: Path) -> None:
        """a directory link into an empty source directory is empty until a file appears"""
        source.joinpath("app", "sub", "x.txt").unlink()
        expand(mirror.joinpath("app"))

        assert is_effectively_empty(mirror.joinpath("app", "sub"))

        source.joinpath("app", "sub", "later.txt").write_text("later")
        assert not is_effectively_empty(mirror.joinpath("app", "sub"))

    @staticmethod
    def test_find_after_expand(source: Path, mirror: Path) -> None:
        """the per entry links are found under the source prefix"""
        expand(mirror.joinpath("app"))

        found = sorted(str(r.dst) for r in find_links_with_prefix(mirror, source.joinpath("app")))

        assert found == [str(mirror.joinpath("app", "a.txt")), str(mirror.joinpath("app", "sub"))]
