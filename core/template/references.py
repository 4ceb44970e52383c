"""Discover the external outputs a function depends on."""

from __future__ import annotations

from typing import Any, Iterable, assert_never

from core.models import (
    CoalescedVariable,
    EnvironmentVariable,
    IAMActionPermission,
    LambdaFunction,
    Parameter,
    ParameterVariable,
    Permission,
    ResourceOutputReference,
    ResourceOutputVariable,
    SendMailPermission,
    Table,
    TableNameVariable,
    TablePermission,
    UserPoolPermission,
    VariableValue,
    table_output_reference,
    user_pool_output_reference,
)


def _value_references(value: VariableValue) -> list[ResourceOutputReference]:
    if isinstance(value, Parameter):
        return []
    return [value]


class TableReferences:
    def to_output_references(self, table: Table) -> list[ResourceOutputReference]:
        return [table_output_reference(table)]


class PermissionReferences:
    def to_output_references(self, permission: Permission) -> list[ResourceOutputReference]:
        if isinstance(permission, TablePermission):
            return [table_output_reference(permission.table)]
        if isinstance(permission, UserPoolPermission):
            return [user_pool_output_reference(permission.user_pool, "UserPoolId")]
        if isinstance(permission, SendMailPermission):
            return []
        if isinstance(permission, IAMActionPermission):
            return [resource for resource in permission.resources if isinstance(resource, ResourceOutputReference)]
        assert_never(permission)


class VariableReferences:
    def to_output_references(self, variable: EnvironmentVariable) -> list[ResourceOutputReference]:
        if isinstance(variable, TableNameVariable):
            return [table_output_reference(variable.table)]
        if isinstance(variable, ParameterVariable):
            return []
        if isinstance(variable, ResourceOutputVariable):
            return [variable.reference]
        if isinstance(variable, CoalescedVariable):
            return [*_value_references(variable.first), *_value_references(variable.second)]
        assert_never(variable)


def collect_output_references(function: LambdaFunction) -> list[ResourceOutputReference]:
    """Return every distinct reference in discovery order: environment, permissions, event source."""
    variables = VariableReferences()
    permissions = PermissionReferences()

    discovered: list[ResourceOutputReference] = []
    for variable in function.environment:
        discovered.extend(variables.to_output_references(variable))
    for permission in function.permissions:
        discovered.extend(permissions.to_output_references(permission))
    if function.event_source is not None:
        discovered.extend(TableReferences().to_output_references(function.event_source))

    unique: dict[str, ResourceOutputReference] = {}
    for reference in discovered:
        unique.setdefault(reference.key, reference)
    return list(unique.values())


def group_dependencies(references: Iterable[ResourceOutputReference]) -> list[dict[str, Any]]:
    """Group references per resource into backend registry ``dependsOn`` entries."""
    groups: dict[str, list[ResourceOutputReference]] = {}
    for reference in references:
        groups.setdefault(reference.group_key, []).append(reference)

    return [
        {
            "category": members[0].category,
            "resourceName": members[0].resource,
            "attributes": [member.output for member in members],
        }
        for members in groups.values()
    ]


def function_dependencies(function: LambdaFunction) -> list[dict[str, Any]]:
    return group_dependencies(collect_output_references(function))


__all__ = [
    "PermissionReferences",
    "TableReferences",
    "VariableReferences",
    "collect_output_references",
    "function_dependencies",
    "group_dependencies",
]
