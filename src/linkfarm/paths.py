"""
paths.py

Pure path helpers:
- rebase a path from one root onto another
- component-wise prefix test
- environment variable and home directory expansion of user input

"""
import os
import re
from pathlib import Path, PurePath
from typing import Mapping, Optional, Union

from linkfarm.errors import InvalidPathError, PathStructureError

PathText = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]

_ENV_REFERENCE = re.compile(r"\$(?:\{(?P<braced>[^}]*)\}|(?P<named>[A-Za-z_][A-Za-z0-9_]*))")
_ENV_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_under(path: PurePath, prefix: PurePath) -> bool:
    """True when the components of `path` begin with exactly those of `prefix`"""
    return PurePath(path).is_relative_to(PurePath(prefix))


def rebase(path: PurePath, base: PurePath, new_base: PurePath) -> Path:
    """
    Moves `path` from under `base` to under `new_base`, keeping the remainder.

    Parameters
    ----------
    path : PurePath
        Path to rewrite, must start with `base`
    base : PurePath
        Leading directory to strip
    new_base : PurePath
        Directory the remainder is joined onto

    Raises
    ------
    PathStructureError
        `base` is not a component-wise prefix of `path`
    """

    try:
        remainder = PurePath(path).relative_to(PurePath(base))
    except ValueError:
        raise PathStructureError(path, base) from None
    return Path(new_base).joinpath(remainder)


def _decode(text: PathText) -> str:
    try:
        raw = os.fspath(text)
    except TypeError:
        raise InvalidPathError(f"not path text: {text!r}") from None

    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidPathError(f"path is not valid utf-8: {text!r}") from None
    else:
        try:
            raw.encode("utf-8")
        except UnicodeEncodeError:
            raise InvalidPathError(f"path is not valid utf-8: {text!r}") from None

    if "\x00" in raw:
        raise InvalidPathError(f"path contains a NUL byte: {text!r}")
    return raw


def _expand_vars(text: str, environ: Mapping[str, str]) -> str:
    def _substitute(match: "re.Match[str]") -> str:
        named = match.group("named")
        if named is not None:
            name, default = named, None
        else:
            name, sep, default_text = match.group("braced").partition(":-")
            default = default_text if sep else None
            if not _ENV_NAME.fullmatch(name):
                raise InvalidPathError(f"bad environment reference {match.group(0)!r} in {text!r}")

        value = environ.get(name)
        if value:
            return value
        if default is not None:
            return default
        if value is not None:
            return value
        raise InvalidPathError(f"environment variable {name} is not set ({text!r})")

    return _ENV_REFERENCE.sub(_substitute, text)


def expand_path(text: PathText, environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Resolves `$VAR`, `${VAR}`, `${VAR:-default}` and a leading `~` in user
    supplied path text. The result is not made absolute.

    Raises
    ------
    InvalidPathError
        The text cannot be decoded or a variable is unset without a default
    """

    raw = _decode(text)
    expanded = _expand_vars(raw, os.environ if environ is None else environ)
    return Path(os.path.expanduser(expanded))
