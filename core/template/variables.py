"""Resolve environment variables to their runtime expressions."""

from __future__ import annotations

from typing import assert_never

from core.models import (
    CoalescedVariable,
    EnvironmentVariable,
    ParameterVariable,
    ResourceOutputVariable,
    Table,
    TableNameVariable,
    VariableDefinition,
)
from core.template.conditions import condition_name_for_variable
from core.template.expressions import (
    TableDetails,
    expression_for_parameter,
    expression_for_reference,
    expression_for_value,
    fn_if,
)


def table_name_variable_name(table: Table) -> str:
    return f"{table.table_name}_table_name".upper()


class VariableResolver:
    def __init__(self, tables: TableDetails | None = None) -> None:
        self.tables = tables or TableDetails()

    def to_variable(self, variable: EnvironmentVariable) -> VariableDefinition:
        if isinstance(variable, TableNameVariable):
            return VariableDefinition(
                name=table_name_variable_name(variable.table),
                block=self.tables.name_expression(variable.table),
            )
        if isinstance(variable, ParameterVariable):
            return VariableDefinition(name=variable.name, block=expression_for_parameter(variable.parameter))
        if isinstance(variable, ResourceOutputVariable):
            return VariableDefinition(name=variable.name, block=expression_for_reference(variable.reference))
        if isinstance(variable, CoalescedVariable):
            return VariableDefinition(
                name=variable.name,
                block=fn_if(
                    condition_name_for_variable(variable),
                    expression_for_value(variable.first),
                    expression_for_value(variable.second),
                ),
            )
        assert_never(variable)


__all__ = ["VariableResolver", "table_name_variable_name"]
