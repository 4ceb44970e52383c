"""API route compiling a function definition into a template."""

from __future__ import annotations

from typing import Any

from apiserver.routes._request import read_body, read_function
from core.errors import DefinitionError
from core.template.assembler import TemplateAssembler


def handle(event: dict[str, Any]) -> dict[str, Any]:
    data = read_body(event)
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise DefinitionError("body.name", "name is required")
    template = TemplateAssembler().build(name, read_function(data))
    return {"statusCode": 200, "body": {"template": template}}
