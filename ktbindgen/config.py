"""Bindings configuration: the generated package name and the native library name"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError

ROOT_PACKAGE = "uniffi"

_FIELDS = ("package_name", "cdylib_name")


@dataclass(frozen=True)
class Config:
    """Overrides for the generated Kotlin.

    These only control details of the Kotlin that do not affect the native
    component, which is entirely determined by the component interface.
    """

    package_name: Optional[str] = None
    cdylib_name: Optional[str] = None

    @classmethod
    def from_interface(cls, ci) -> Config:
        """Defaults derived from the component's namespace"""
        return cls(
            package_name=f"{ROOT_PACKAGE}.{ci.namespace}",
            cdylib_name=f"{ROOT_PACKAGE}_{ci.namespace}",
        )

    def merge_with(self, other: Config) -> Config:
        """Fields set here win, unset fields are taken from `other`"""
        return Config(
            package_name=self.package_name if self.package_name is not None else other.package_name,
            cdylib_name=self.cdylib_name if self.cdylib_name is not None else other.cdylib_name,
        )

    def resolve(self, ci) -> ResolvedConfig:
        merged = self.merge_with(Config.from_interface(ci))
        return ResolvedConfig(package_name=merged.package_name, cdylib_name=merged.cdylib_name)


@dataclass(frozen=True)
class ResolvedConfig:
    """Config for one generation run, every field settled"""

    package_name: str
    cdylib_name: str


def load_config(config_path: Path) -> Config:
    """Read the `[bindings.kotlin]` table of a TOML config file.

    A missing file is the same as an empty one.
    """
    if not config_path.exists():
        return Config()

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {config_path}: {exc}") from exc

    bindings = data.get("bindings", {})
    if not isinstance(bindings, dict):
        raise ConfigError(f"[bindings] in {config_path} must be a table")
    section = bindings.get("kotlin", {})
    if not isinstance(section, dict):
        raise ConfigError(f"[bindings.kotlin] in {config_path} must be a table")
    return Config(**{name: _optional_str(section, name, config_path) for name in _FIELDS})


def _optional_str(section: Dict[str, Any], key: str, config_path: Path) -> Optional[str]:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"bindings.kotlin.{key} in {config_path} must be a string")
    return value
