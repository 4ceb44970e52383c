"""Read and rewrite the Amplify ``backend-config.json`` registry."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from core.models import LambdaFunction
from core.template.references import function_dependencies

BACKEND_CONFIG_FILE = "backend-config.json"


def function_entry(function: LambdaFunction) -> Dict[str, Any]:
    return {
        "service": "Lambda",
        "providerPlugin": "awscloudformation",
        "build": True,
        "dependsOn": function_dependencies(function),
    }


def register_function(config: Dict[str, Any], name: str, function: LambdaFunction) -> Dict[str, Any]:
    """Return a copy of ``config`` with the function's entry replaced."""
    updated = dict(config)
    functions = dict(updated.get("function") or {})
    functions[name] = function_entry(function)
    updated["function"] = functions
    return updated


def load_backend_config(backend_dir: Path) -> Dict[str, Any]:
    path = backend_dir / BACKEND_CONFIG_FILE
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise RuntimeError(f"{path} must contain a JSON object")
    return payload


def save_backend_config(backend_dir: Path, config: Dict[str, Any]) -> Path:
    path = backend_dir / BACKEND_CONFIG_FILE
    path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    return path


def update_backend_config(backend_dir: Path, name: str, function: LambdaFunction) -> Path:
    config = load_backend_config(backend_dir)
    return save_backend_config(backend_dir, register_function(config, name, function))


__all__ = [
    "BACKEND_CONFIG_FILE",
    "function_entry",
    "load_backend_config",
    "register_function",
    "save_backend_config",
    "update_backend_config",
]
