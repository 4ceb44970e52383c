"""Output helpers for the lambdacf CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel

TEMPLATE_SUFFIXES = {
    "json": "json",
    "yaml": "yml",
}


def _default_serializer(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def render(data: Any, fmt: str, *, indent: int | str = 2) -> str:
    if fmt == "json":
        return json.dumps(data, indent=indent, default=_default_serializer)
    if fmt == "yaml":
        # Round-trip through JSON so pydantic models and tuples serialize like they do there.
        plain = json.loads(json.dumps(data, default=_default_serializer))
        return yaml.safe_dump(plain, sort_keys=False, default_flow_style=False)
    raise ValueError(f"Unsupported format: {fmt}")


def parse(text: str, fmt: str) -> Any:
    if fmt == "json":
        return json.loads(text)
    if fmt == "yaml":
        return yaml.safe_load(text)
    raise ValueError(f"Unsupported format: {fmt}")


def emit(data: Any, fmt: str, output_path: Path | None = None, *, indent: int | str = 2) -> None:
    rendered = render(data, fmt, indent=indent)
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(rendered + ("\n" if not rendered.endswith("\n") else ""), encoding="utf-8")
    else:
        print(rendered.rstrip("\n"))


def template_filename(name: str, fmt: str) -> str:
    return f"{name}-cloudformation-template.{TEMPLATE_SUFFIXES[fmt]}"


def write_template(template: dict[str, Any], output_dir: Path, name: str, fmt: str) -> Path:
    """Write the template the way Amplify expects it: tab-indented JSON or block YAML."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / template_filename(name, fmt)
    path.write_text(render(template, fmt, indent="\t"), encoding="utf-8")
    return path


__all__ = ["emit", "parse", "render", "template_filename", "write_template"]
