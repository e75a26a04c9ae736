import os
import json
from typing import Dict, Any, Optional
from dataclasses import dataclass
from pathlib import Path

import pydantic

from linkfarm.errors import ConfigError
from linkfarm.paths import expand_path
from linkfarm.probe import DEFAULT_MAX_DEPTH


def _resolve_path(path: str) -> Path:
    return expand_path(path)


def _user_config_dir() -> Path:
    return Path.home().joinpath(".config")


def _linkfarm_dir() -> Path:
    return _user_config_dir().joinpath("linkfarm")


def _conf_path() -> Path:
    override = os.environ.get("LINKFARM_CONFIG")
    if override:
        return _resolve_path(override)
    return _linkfarm_dir().joinpath("linkfarm.json")


class ConfigFile(pydantic.BaseModel):
    """Contents of linkfarm.json, every key optional"""

    model_config = pydantic.ConfigDict(extra="forbid")

    source: Optional[str] = None
    mirror: Optional[str] = None
    staged_expand: Optional[bool] = None
    max_depth: Optional[pydantic.PositiveInt] = None
    log_level: Optional[str] = None
    log_file: Optional[str] = None


@dataclass
class Config:
    """linkfarm runtime config object"""

    __slots__ = (
        "source",
        "mirror",
        "staged_expand",
        "max_depth",
        "log_level",
        "log_file",
    )

    source: Path
    mirror: Path
    staged_expand: bool
    max_depth: int
    log_level: str
    log_file: Optional[Path]

    __annotations__ = {
        "source": Path,
        "mirror": Path,
        "staged_expand": bool,
        "max_depth": int,
        "log_level": str,
        "log_file": Optional[Path],
    }

    def _overrides(self, conf: dict) -> None:
        """apply overrides from conf"""

        try:
            _conf = ConfigFile.model_validate(conf)
        except pydantic.ValidationError as err:
            raise ConfigError(f"invalid config {_conf_path()}: {err}") from err

        if _conf.source is not None:
            setattr(self, "source", _resolve_path(_conf.source))

        if _conf.mirror is not None:
            setattr(self, "mirror", _resolve_path(_conf.mirror))

        if _conf.staged_expand is not None:
            setattr(self, "staged_expand", _conf.staged_expand)

        if _conf.max_depth is not None:
            setattr(self, "max_depth", _conf.max_depth)

        if _conf.log_level is not None:
            setattr(self, "log_level", _conf.log_level.upper())

        if _conf.log_file is not None:
            setattr(self, "log_file", _resolve_path(_conf.log_file))

    def __init__(self, load: bool = True) -> None:
        self.source = Path.home().joinpath("dotfiles")
        self.mirror = Path.home()
        self.staged_expand = True
        self.max_depth = DEFAULT_MAX_DEPTH
        self.log_level = "WARNING"
        self.log_file = None

        if load:
            conf_path = _conf_path()
            if conf_path.exists():
                with conf_path.open("r") as f:
                    conf = json.load(f)
                self._overrides(conf=conf)

    def __repr__(self) -> str:
        attributes = [k for k in self.__slots__]
        width = max([len(i) for i in attributes])
        s = f"Config: {str(_conf_path())}\n"
        s += "-" * len(s) + "\n"
        for k in attributes:
            v = self.__getattribute__(k)
            space = " " * (width - len(str(k)) + 2)
            s += f"  {k}{space}{str(v)}\n"
        return s

    def dict(self) -> Dict[str, Any]:
        """Returns a dict representation of the object"""
        return {
            "source": str(self.source),
            "mirror": str(self.mirror),
            "staged_expand": self.staged_expand,
            "max_depth": self.max_depth,
            "log_level": self.log_level,
            "log_file": None if self.log_file is None else str(self.log_file),
        }

    def save(self) -> None:
        """Write the config out to disk"""

        conf_path = _conf_path()
        conf_path.parent.mkdir(parents=True, exist_ok=True)
        with open(conf_path, "w") as f:
            f.write(json.dumps(self.dict(), indent=4))
