"""Exceptions raised while compiling function definitions."""

from __future__ import annotations

from typing import Any


class TemplateError(Exception):
    """Base class for definitions that cannot be compiled into a consistent template."""


class ConditionCollisionError(TemplateError):
    def __init__(self, name: str, existing: Any, duplicate: Any) -> None:
        super().__init__(
            f"Condition {name!r} is generated by two different variables: {existing!r} and {duplicate!r}"
        )
        self.name = name
        self.existing = existing
        self.duplicate = duplicate


class ParameterCollisionError(TemplateError):
    def __init__(self, name: str, existing: Any, duplicate: Any) -> None:
        super().__init__(
            f"Parameter {name!r} is derived from two different references: {existing!r} and {duplicate!r}"
        )
        self.name = name
        self.existing = existing
        self.duplicate = duplicate


class DefinitionError(Exception):
    """Function definition file is missing or does not describe a valid function."""

    def __init__(self, path: Any, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


__all__ = ["ConditionCollisionError", "DefinitionError", "ParameterCollisionError", "TemplateError"]
