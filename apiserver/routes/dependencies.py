"""API route listing the outputs a function definition depends on."""

from __future__ import annotations

from typing import Any

from apiserver.routes._request import read_body, read_function
from core.template.references import function_dependencies


def handle(event: dict[str, Any]) -> dict[str, Any]:
    function = read_function(read_body(event))
    return {"statusCode": 200, "body": {"dependsOn": function_dependencies(function)}}
