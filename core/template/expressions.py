"""CloudFormation intrinsic functions and the runtime expressions built from them."""

from __future__ import annotations

from typing import Any, Literal

from core.models import Parameter, ResourceOutputReference, Table, table_output_reference

Expression = Any

TableAttribute = Literal["Name", "Arn", "StreamArn"]


def ref(name: str) -> dict[str, Any]:
    return {"Ref": name}


def fn_if(condition: str, when_true: Expression, when_false: Expression) -> dict[str, Any]:
    return {"Fn::If": [condition, when_true, when_false]}


def fn_equals(left: Expression, right: Expression) -> dict[str, Any]:
    return {"Fn::Equals": [left, right]}


def fn_not(expression: Expression) -> dict[str, Any]:
    return {"Fn::Not": [expression]}


def fn_join(delimiter: str, values: list[Expression]) -> dict[str, Any]:
    return {"Fn::Join": [delimiter, values]}


def fn_sub(template: str, variables: dict[str, Expression] | None = None) -> dict[str, Any]:
    if variables is None:
        return {"Fn::Sub": template}
    return {"Fn::Sub": [template, variables]}


def get_att(resource: str, attribute: str) -> dict[str, Any]:
    return {"Fn::GetAtt": [resource, attribute]}


def import_value(template: str) -> dict[str, Any]:
    """Import a value exported by another stack, the export name being a ``Fn::Sub`` template."""
    return {"Fn::ImportValue": fn_sub(template)}


def region_and_account() -> dict[str, Any]:
    return {
        "region": ref("AWS::Region"),
        "account": ref("AWS::AccountId"),
    }


# ---------------------------------------------------------------------------
# Parameters and references


def parameter_for_reference(reference: ResourceOutputReference) -> Parameter:
    """Every reference enters the stack as a parameter named ``category + resource + output``."""
    return Parameter(name=f"{reference.category}{reference.resource}{reference.output}")


def expression_for_parameter(parameter: Parameter) -> dict[str, Any]:
    return ref(parameter.name)


def expression_for_reference(reference: ResourceOutputReference) -> dict[str, Any]:
    return expression_for_parameter(parameter_for_reference(reference))


def expression_for_value(value: Parameter | ResourceOutputReference) -> dict[str, Any]:
    if isinstance(value, Parameter):
        return expression_for_parameter(value)
    return expression_for_reference(value)


class TableDetails:
    """Runtime expressions for a table exported by its API stack."""

    @staticmethod
    def parameter(table: Table) -> Parameter:
        return parameter_for_reference(table_output_reference(table))

    def attribute(self, table: Table, attribute: TableAttribute) -> dict[str, Any]:
        api_id = self.parameter(table).name
        return import_value(f"${{{api_id}}}:GetAtt:{table.table_name}Table:{attribute}")

    def name_expression(self, table: Table) -> dict[str, Any]:
        return self.attribute(table, "Name")

    def arn_expression(self, table: Table) -> dict[str, Any]:
        return self.attribute(table, "Arn")

    def stream_arn_expression(self, table: Table) -> dict[str, Any]:
        return self.attribute(table, "StreamArn")


__all__ = [
    "Expression",
    "TableDetails",
    "expression_for_parameter",
    "expression_for_reference",
    "expression_for_value",
    "fn_equals",
    "fn_if",
    "fn_join",
    "fn_not",
    "fn_sub",
    "get_att",
    "import_value",
    "parameter_for_reference",
    "ref",
    "region_and_account",
]
