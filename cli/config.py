"""Configuration loader for the lambdacf CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.template.assembler import (
    DEFAULT_ASSET_PATH,
    DEFAULT_DESCRIPTION,
    DEFAULT_HANDLER,
    DEFAULT_RUNTIME,
    DEFAULT_TIMEOUT,
)

DEFAULTS = {
    "amplify_backend": "amplify/backend",
    "default_format": "json",
    "runtime": DEFAULT_RUNTIME,
    "timeout": DEFAULT_TIMEOUT,
    "handler": DEFAULT_HANDLER,
    "asset_path": DEFAULT_ASSET_PATH,
    "description": DEFAULT_DESCRIPTION,
}

FORMATS = ("json", "yaml")


@dataclass(slots=True)
class Settings:
    amplify_backend: str = DEFAULTS["amplify_backend"]
    default_format: str = DEFAULTS["default_format"]
    runtime: str = DEFAULTS["runtime"]
    timeout: str = DEFAULTS["timeout"]
    handler: str = DEFAULTS["handler"]
    asset_path: str = DEFAULTS["asset_path"]
    description: str = DEFAULTS["description"]

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "Settings":
        default_format = data.get("default_format", DEFAULTS["default_format"])
        if default_format not in FORMATS:
            raise ValueError(f"default_format must be one of: {', '.join(FORMATS)}")
        return cls(
            amplify_backend=data.get("amplify_backend", DEFAULTS["amplify_backend"]),
            default_format=default_format,
            runtime=data.get("runtime", DEFAULTS["runtime"]),
            timeout=str(data.get("timeout", DEFAULTS["timeout"])),
            handler=data.get("handler", DEFAULTS["handler"]),
            asset_path=data.get("asset_path", DEFAULTS["asset_path"]),
            description=data.get("description", DEFAULTS["description"]),
        )

    def merge_cli(self, format_override: str | None = None, amplify_backend: str | None = None) -> "Settings":
        return Settings(
            amplify_backend=amplify_backend or self.amplify_backend,
            default_format=format_override or self.default_format,
            runtime=self.runtime,
            timeout=self.timeout,
            handler=self.handler,
            asset_path=self.asset_path,
            description=self.description,
        )

    def assembler_options(self) -> dict[str, str]:
        return {
            "runtime": self.runtime,
            "timeout": self.timeout,
            "handler": self.handler,
            "asset_path": self.asset_path,
            "description": self.description,
        }


def load_settings(path: Path) -> Settings:
    if not path.exists():
        return Settings()

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ValueError("Configuration file must be a mapping of keys to values.")

    return Settings.from_mapping(data)


__all__ = ["FORMATS", "Settings", "load_settings"]
