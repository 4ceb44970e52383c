"""Request body helpers shared by the API routes."""

from __future__ import annotations

import json
from typing import Any

from core.errors import DefinitionError
from core.loader import parse_definition
from core.models import LambdaFunction


def read_body(event: dict[str, Any]) -> dict[str, Any]:
    payload = event.get("body")
    if isinstance(payload, str):
        data = json.loads(payload or "{}")
    else:
        data = payload or {}
    if not isinstance(data, dict):
        raise DefinitionError("body", "request body must be a JSON object")
    return data


def read_function(data: dict[str, Any]) -> LambdaFunction:
    return parse_definition(data.get("function"), source="body.function")
