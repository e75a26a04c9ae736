"""
errors.py

Exceptions raised by linkfarm. Filesystem failures are not wrapped, they
propagate as the builtin `OSError` family.
"""


class LinkFarmError(Exception):
    """Base class for linkfarm errors"""


class PathStructureError(LinkFarmError, ValueError):
    """A path does not sit under the base it was expected to"""

    def __init__(self, path, base) -> None:
        self.path = path
        self.base = base
        super().__init__(f"path is not under base: {path} (base {base})")


class InvalidPathError(LinkFarmError, ValueError):
    """Path text could not be decoded or expanded"""


class CycleDetectedError(LinkFarmError):
    """A link following traversal went deeper than its bound"""


class NotASymlinkError(LinkFarmError):
    """Expansion was asked for on something that is not a directory link"""

    def __init__(self, path) -> None:
        self.path = path
        super().__init__(f"{path} is not a symbolic link to a directory")


class ConfigError(LinkFarmError):
    """The config file does not hold a valid configuration"""
