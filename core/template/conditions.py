"""Template conditions generated by permissions and environment variables."""

from __future__ import annotations

from typing import assert_never

from core.models import (
    CoalescedVariable,
    ConditionDefinition,
    EnvironmentVariable,
    ParameterVariable,
    Permission,
    ResourceOutputVariable,
    TableNameVariable,
)
from core.template.expressions import expression_for_value, fn_equals, fn_not


def condition_name_for_variable(variable: CoalescedVariable) -> str:
    return f"FirstNotEmpty_{variable.name}"


class VariableConditions:
    def to_conditions(self, variable: EnvironmentVariable) -> list[ConditionDefinition]:
        if isinstance(variable, (TableNameVariable, ParameterVariable, ResourceOutputVariable)):
            return []
        if isinstance(variable, CoalescedVariable):
            return [
                ConditionDefinition(
                    name=condition_name_for_variable(variable),
                    block=fn_not(fn_equals(expression_for_value(variable.first), "")),
                )
            ]
        assert_never(variable)


class PermissionConditions:
    def to_conditions(self, permission: Permission) -> list[ConditionDefinition]:
        return []


__all__ = ["PermissionConditions", "VariableConditions", "condition_name_for_variable"]
