"""Lambda handler serving the compiler behind API Gateway (REST proxy events)."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from apiserver.routes import dependencies, template
from core.errors import DefinitionError, TemplateError

LOGGER = logging.getLogger(__name__)

RouteHandler = Callable[[dict[str, Any]], dict[str, Any]]

# path -> method -> handler
ROUTES: dict[str, dict[str, RouteHandler]] = {
    "/compile": {"POST": template.handle},
    "/dependencies": {"POST": dependencies.handle},
}

JSON_HEADERS = {"Content-Type": "application/json"}


def _error(status: int, message: str, **headers: str) -> dict[str, Any]:
    return {"statusCode": status, "headers": {**JSON_HEADERS, **headers}, "body": {"message": message}}


def _dispatch(event: dict[str, Any]) -> dict[str, Any]:
    path = event.get("resource") or event.get("path") or "/"
    method = str(event.get("httpMethod") or "GET").upper()

    methods = ROUTES.get(path)
    if methods is None:
        return _error(404, f"no route for {path}")
    handler = methods.get(method)
    if handler is None:
        return _error(405, f"{method} not allowed on {path}", Allow=", ".join(sorted(methods)))

    try:
        return handler(event)
    except json.JSONDecodeError as exc:
        return _error(400, f"invalid JSON body: {exc}")
    except (DefinitionError, TemplateError) as exc:
        LOGGER.info("Rejected %s %s: %s", method, path, exc)
        return _error(400, str(exc))


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    response = _dispatch(event)
    response["headers"] = {**JSON_HEADERS, **response.get("headers", {})}
    if not isinstance(response.get("body"), str):
        response["body"] = json.dumps(response.get("body", {}))
    return response
