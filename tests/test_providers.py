"""Per-variant fragment tests for parameters, policies, conditions, variables and references."""

from __future__ import annotations

import pytest

from core.models import (
    ApiTable,
    CoalescedVariable,
    IAMActionPermission,
    Parameter,
    ParameterVariable,
    ResourceOutputReference,
    ResourceOutputVariable,
    SendMailPermission,
    TableNameVariable,
    TablePermission,
    UserPool,
    UserPoolPermission,
)
from core.template.conditions import PermissionConditions, VariableConditions
from core.template.expressions import (
    TableDetails,
    expression_for_parameter,
    expression_for_reference,
    parameter_for_reference,
)
from core.template.parameters import PermissionParameters, TableParameters, VariableParameters
from core.template.policy import PermissionPolicy
from core.template.references import PermissionReferences, VariableReferences
from core.template.variables import VariableResolver

TODO = ApiTable(api_name="myApi", table_name="Todo")
POOL = UserPool(auth_name="cognito1")
ENDPOINT = ResourceOutputReference(category="api", resource="myApi", output="GraphQLAPIEndpointOutput")
IDENTITY = Parameter(name="sesIdentity", default_value="arn:aws:ses:us-east-1:123456789012:identity/example.com")

ALL_PERMISSIONS = [
    TablePermission(table=TODO, actions=["ReadItem", "UpdateItem"]),
    UserPoolPermission(user_pool=POOL, actions=["AdminGetUser", "ListUsers"]),
    SendMailPermission(identity=IDENTITY),
    IAMActionPermission(actions=["appsync:GraphQL"], resources=["arn:aws:appsync:*", ENDPOINT]),
]


def _todo_import(attribute: str) -> dict[str, object]:
    return {"Fn::ImportValue": {"Fn::Sub": f"${{apimyApiGraphQLAPIIdOutput}}:GetAtt:TodoTable:{attribute}"}}


# ---------------------------------------------------------------------------
# expressions


def test_parameter_name_concatenates_reference_fields():
    assert parameter_for_reference(ENDPOINT) == Parameter(name="apimyApiGraphQLAPIEndpointOutput")


def test_references_are_read_through_parameters():
    assert expression_for_reference(ENDPOINT) == {"Ref": "apimyApiGraphQLAPIEndpointOutput"}
    assert expression_for_parameter(IDENTITY) == {"Ref": "sesIdentity"}


def test_table_details_import_exported_attributes():
    tables = TableDetails()
    assert tables.name_expression(TODO) == _todo_import("Name")
    assert tables.arn_expression(TODO) == _todo_import("Arn")
    assert tables.stream_arn_expression(TODO) == _todo_import("StreamArn")


# ---------------------------------------------------------------------------
# parameters


def test_permission_parameters():
    provider = PermissionParameters()
    table_permission, pool_permission, mail_permission, iam_permission = ALL_PERMISSIONS
    assert provider.to_parameters(table_permission) == [Parameter(name="apimyApiGraphQLAPIIdOutput")]
    assert provider.to_parameters(pool_permission) == [Parameter(name="authcognito1UserPoolId")]
    assert provider.to_parameters(mail_permission) == [IDENTITY]
    assert provider.to_parameters(iam_permission) == [Parameter(name="apimyApiGraphQLAPIEndpointOutput")]


def test_iam_permission_with_only_literal_resources_needs_no_parameters():
    permission = IAMActionPermission(actions=["s3:GetObject"], resources=["arn:aws:s3:::bucket/*"])
    assert PermissionParameters().to_parameters(permission) == []


def test_variable_parameters():
    provider = VariableParameters()
    assert provider.to_parameters(TableNameVariable(table=TODO)) == [Parameter(name="apimyApiGraphQLAPIIdOutput")]
    assert provider.to_parameters(ParameterVariable(name="SENDER", parameter=IDENTITY)) == [IDENTITY]
    assert provider.to_parameters(ResourceOutputVariable(name="ENDPOINT", reference=ENDPOINT)) == [
        Parameter(name="apimyApiGraphQLAPIEndpointOutput")
    ]
    coalesced = CoalescedVariable(name="URL", first=Parameter(name="customUrl"), second=ENDPOINT)
    assert provider.to_parameters(coalesced) == [
        Parameter(name="customUrl"),
        Parameter(name="apimyApiGraphQLAPIEndpointOutput"),
    ]


def test_table_parameters():
    assert TableParameters().to_parameters(TODO) == [Parameter(name="apimyApiGraphQLAPIIdOutput")]


# ---------------------------------------------------------------------------
# policy statements


@pytest.mark.parametrize("permission", ALL_PERMISSIONS, ids=lambda permission: permission.type)
def test_every_statement_allows_at_least_one_action(permission):
    statement = PermissionPolicy().to_statement(permission).to_template()
    assert statement["Effect"] == "Allow"
    assert statement["Action"]


def test_table_statement_maps_actions_in_order():
    policy = PermissionPolicy()
    statement = policy.to_statement(TablePermission(table=TODO, actions=["ReadItem", "UpdateItem"])).to_template()
    assert statement["Action"] == ["dynamodb:GetItem", "dynamodb:UpdateItem"]

    reversed_statement = policy.to_statement(TablePermission(table=TODO, actions=["UpdateItem", "ReadItem"]))
    assert reversed_statement.actions == ["dynamodb:UpdateItem", "dynamodb:GetItem"]


def test_table_statement_scopes_to_imported_table_name():
    statement = PermissionPolicy().to_statement(TablePermission(table=TODO, actions=["ReadItem"])).to_template()
    assert statement["Resource"] == [
        {
            "Fn::Sub": [
                "arn:aws:dynamodb:${region}:${account}:table/${tableName}",
                {
                    "region": {"Ref": "AWS::Region"},
                    "account": {"Ref": "AWS::AccountId"},
                    "tableName": _todo_import("Name"),
                },
            ]
        }
    ]


def test_user_pool_statement_uses_pool_id_parameter():
    statement = PermissionPolicy().to_statement(ALL_PERMISSIONS[1]).to_template()
    assert statement["Action"] == ["cognito-idp:AdminGetUser", "cognito-idp:ListUsers"]
    template, variables = statement["Resource"]["Fn::Sub"]
    assert template == "arn:aws:cognito-idp:${region}:${account}:userpool/${userPoolId}"
    assert variables["userPoolId"] == {"Ref": "authcognito1UserPoolId"}


def test_send_mail_statement_is_scoped_to_identity():
    statement = PermissionPolicy().to_statement(ALL_PERMISSIONS[2]).to_template()
    assert statement == {
        "Effect": "Allow",
        "Action": ["ses:SendEmail"],
        "Resource": {"Fn::Sub": "${sesIdentity}"},
    }


def test_iam_action_statement_passes_strings_through():
    statement = PermissionPolicy().to_statement(ALL_PERMISSIONS[3]).to_template()
    assert statement["Action"] == ["appsync:GraphQL"]
    assert statement["Resource"] == ["arn:aws:appsync:*", {"Ref": "apimyApiGraphQLAPIEndpointOutput"}]


# ---------------------------------------------------------------------------
# conditions and variables


def test_only_coalesced_variables_produce_conditions():
    conditions = VariableConditions()
    assert conditions.to_conditions(TableNameVariable(table=TODO)) == []
    assert conditions.to_conditions(ParameterVariable(name="SENDER", parameter=IDENTITY)) == []
    assert conditions.to_conditions(ResourceOutputVariable(name="ENDPOINT", reference=ENDPOINT)) == []
    for permission in ALL_PERMISSIONS:
        assert PermissionConditions().to_conditions(permission) == []


def test_coalesced_condition_checks_first_leg_is_not_empty():
    variable = CoalescedVariable(name="X", first=Parameter(name="customUrl"), second=ENDPOINT)
    (condition,) = VariableConditions().to_conditions(variable)
    assert condition.name == "FirstNotEmpty_X"
    assert condition.block == {"Fn::Not": [{"Fn::Equals": [{"Ref": "customUrl"}, ""]}]}


def test_table_name_variable_is_named_after_table():
    definition = VariableResolver().to_variable(TableNameVariable(table=TODO))
    assert definition.name == "TODO_TABLE_NAME"
    assert definition.block == _todo_import("Name")


def test_parameter_and_output_variables_keep_given_name():
    resolver = VariableResolver()
    sender = resolver.to_variable(ParameterVariable(name="SENDER", parameter=IDENTITY))
    assert (sender.name, sender.block) == ("SENDER", {"Ref": "sesIdentity"})
    endpoint = resolver.to_variable(ResourceOutputVariable(name="ENDPOINT", reference=ENDPOINT))
    assert (endpoint.name, endpoint.block) == ("ENDPOINT", {"Ref": "apimyApiGraphQLAPIEndpointOutput"})


def test_coalesced_variable_selects_between_legs():
    variable = CoalescedVariable(name="X", first=ENDPOINT, second=Parameter(name="fallback"))
    definition = VariableResolver().to_variable(variable)
    assert definition.name == "X"
    assert definition.block == {
        "Fn::If": ["FirstNotEmpty_X", {"Ref": "apimyApiGraphQLAPIEndpointOutput"}, {"Ref": "fallback"}]
    }


# ---------------------------------------------------------------------------
# references


def test_permission_references():
    references = PermissionReferences()
    table_permission, pool_permission, mail_permission, iam_permission = ALL_PERMISSIONS
    assert references.to_output_references(table_permission) == [
        ResourceOutputReference(category="api", resource="myApi", output="GraphQLAPIIdOutput")
    ]
    assert references.to_output_references(pool_permission) == [
        ResourceOutputReference(category="auth", resource="cognito1", output="UserPoolId")
    ]
    assert references.to_output_references(mail_permission) == []
    assert references.to_output_references(iam_permission) == [ENDPOINT]


def test_variable_references():
    references = VariableReferences()
    assert references.to_output_references(ParameterVariable(name="SENDER", parameter=IDENTITY)) == []
    assert references.to_output_references(ResourceOutputVariable(name="ENDPOINT", reference=ENDPOINT)) == [ENDPOINT]
    coalesced = CoalescedVariable(name="X", first=Parameter(name="customUrl"), second=ENDPOINT)
    assert references.to_output_references(coalesced) == [ENDPOINT]
