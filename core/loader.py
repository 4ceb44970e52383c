"""Load function definitions from a handlers directory."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

import yaml
from pydantic import ValidationError

from core.errors import DefinitionError
from core.models import LambdaFunction

METADATA_FILES = ("metadata.yml", "metadata.yaml", "metadata.json")


def parse_definition(data: Any, *, source: Any = "<definition>") -> LambdaFunction:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DefinitionError(source, "function definition must be a mapping")
    try:
        return LambdaFunction.model_validate(data)
    except ValidationError as exc:
        raise DefinitionError(source, str(exc)) from exc


def load_function_definition(path: Path) -> LambdaFunction:
    """Parse a YAML or JSON definition file into a ``LambdaFunction``."""
    if not path.is_file():
        raise DefinitionError(path, "definition file not found")

    with path.open("r", encoding="utf-8") as handle:
        if path.suffix == ".json":
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise DefinitionError(path, f"invalid JSON: {exc}") from exc
        else:
            try:
                data = yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise DefinitionError(path, f"invalid YAML: {exc}") from exc

    return parse_definition(data, source=path)


@dataclass(slots=True)
class FunctionDefinitionReader:
    """Each subdirectory of ``handlers_dir`` holding a metadata file is one function."""

    handlers_dir: Path

    def discover(self) -> Iterator[str]:
        if not self.handlers_dir.is_dir():
            raise FileNotFoundError(self.handlers_dir)
        for entry in sorted(self.handlers_dir.iterdir()):
            if entry.is_dir() and self._metadata_path(entry) is not None:
                yield entry.name

    def load(self, name: str) -> LambdaFunction:
        handler_dir = self.handlers_dir / name
        metadata = self._metadata_path(handler_dir)
        if metadata is None:
            raise DefinitionError(handler_dir, f"no metadata file ({', '.join(METADATA_FILES)})")
        return load_function_definition(metadata)

    @staticmethod
    def _metadata_path(handler_dir: Path) -> Path | None:
        for candidate in METADATA_FILES:
            path = handler_dir / candidate
            if path.is_file():
                return path
        return None


__all__ = ["FunctionDefinitionReader", "load_function_definition", "parse_definition"]
