"""Template parameters required by each permission and environment variable."""

from __future__ import annotations

from typing import assert_never

from core.models import (
    CoalescedVariable,
    EnvironmentVariable,
    IAMActionPermission,
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
from core.template.expressions import parameter_for_reference


def _value_parameters(value: VariableValue) -> list[Parameter]:
    if isinstance(value, ResourceOutputReference):
        return [parameter_for_reference(value)]
    return [Parameter(name=value.name, default_value=value.default_value)]


class TableParameters:
    def to_parameters(self, table: Table) -> list[Parameter]:
        return [parameter_for_reference(table_output_reference(table))]


class PermissionParameters:
    def to_parameters(self, permission: Permission) -> list[Parameter]:
        if isinstance(permission, TablePermission):
            return [parameter_for_reference(table_output_reference(permission.table))]
        if isinstance(permission, UserPoolPermission):
            return [parameter_for_reference(user_pool_output_reference(permission.user_pool, "UserPoolId"))]
        if isinstance(permission, SendMailPermission):
            return _value_parameters(permission.identity)
        if isinstance(permission, IAMActionPermission):
            return [
                parameter_for_reference(resource)
                for resource in permission.resources
                if isinstance(resource, ResourceOutputReference)
            ]
        assert_never(permission)


class VariableParameters:
    def to_parameters(self, variable: EnvironmentVariable) -> list[Parameter]:
        if isinstance(variable, TableNameVariable):
            return [parameter_for_reference(table_output_reference(variable.table))]
        if isinstance(variable, ParameterVariable):
            return _value_parameters(variable.parameter)
        if isinstance(variable, ResourceOutputVariable):
            return [parameter_for_reference(variable.reference)]
        if isinstance(variable, CoalescedVariable):
            return [*_value_parameters(variable.first), *_value_parameters(variable.second)]
        assert_never(variable)


__all__ = ["PermissionParameters", "TableParameters", "VariableParameters"]
