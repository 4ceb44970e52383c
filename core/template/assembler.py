"""Assemble a complete CloudFormation template for one function."""

from __future__ import annotations

import logging
from typing import Any

from core.errors import ConditionCollisionError, ParameterCollisionError
from core.models import (
    ConditionDefinition,
    LambdaFunction,
    Parameter,
    PolicyDoc,
    PolicyStatement,
    Table,
)
from core.template.conditions import PermissionConditions, VariableConditions
from core.template.expressions import (
    TableDetails,
    fn_if,
    fn_join,
    fn_equals,
    fn_sub,
    get_att,
    parameter_for_reference,
    ref,
    region_and_account,
)
from core.template.parameters import PermissionParameters, TableParameters, VariableParameters
from core.template.policy import PermissionPolicy
from core.template.references import collect_output_references
from core.template.variables import VariableResolver

logger = logging.getLogger(__name__)

TEMPLATE_FORMAT_VERSION = "2010-09-09"
DEFAULT_DESCRIPTION = "Lambda resource stack creation using Amplify CLI"
DEFAULT_RUNTIME = "nodejs10.x"
DEFAULT_TIMEOUT = "25"
DEFAULT_HANDLER = "index.handler"
DEFAULT_ASSET_PATH = "./src"

ENV_PARAMETER = "env"
RESOURCE_NAME_PARAMETER = "resourceName"
NO_ENV_CONDITION = "ShouldNotCreateEnvResources"
NO_ENV_SENTINEL = "NONE"

FUNCTION_RESOURCE = "LambdaFunction"
ROLE_RESOURCE = "LambdaExecutionRole"
EXECUTION_POLICY_RESOURCE = "lambdaexecutionpolicy"
TRIGGER_POLICY_RESOURCE = "LambdaTriggerPolicy"
EVENT_SOURCE_MAPPING_RESOURCE = "LambdaEventSourceMapping"

LOG_ACTIONS = [
    "logs:CreateLogGroup",
    "logs:CreateLogStream",
    "logs:PutLogEvents",
]
STREAM_ACTIONS = [
    "dynamodb:DescribeStream",
    "dynamodb:GetRecords",
    "dynamodb:GetShardIterator",
    "dynamodb:ListStreams",
]


class TemplateAssembler:
    """Merge the fragments of every permission and variable with the fixed function stack."""

    def __init__(
        self,
        *,
        runtime: str = DEFAULT_RUNTIME,
        timeout: str = DEFAULT_TIMEOUT,
        handler: str = DEFAULT_HANDLER,
        asset_path: str = DEFAULT_ASSET_PATH,
        description: str = DEFAULT_DESCRIPTION,
    ) -> None:
        self.runtime = runtime
        self.timeout = timeout
        self.handler = handler
        self.asset_path = asset_path
        self.description = description
        self.tables = TableDetails()
        self.permission_parameters = PermissionParameters()
        self.variable_parameters = VariableParameters()
        self.table_parameters = TableParameters()
        self.permission_conditions = PermissionConditions()
        self.variable_conditions = VariableConditions()
        self.permission_policy = PermissionPolicy(self.tables)
        self.variable_resolver = VariableResolver(self.tables)

    def build(self, name: str, function: LambdaFunction) -> dict[str, Any]:
        self._check_reference_parameters(function)

        parameters = self._compose_parameters(name, function)
        conditions = self._compose_conditions(function)
        resources = self._compose_resources(name, function)

        logger.debug(
            "Assembled template for %s: %d parameters, %d conditions, %d resources",
            name,
            len(parameters),
            len(conditions),
            len(resources),
        )
        return {
            "AWSTemplateFormatVersion": TEMPLATE_FORMAT_VERSION,
            "Description": self.description,
            "Parameters": parameters,
            "Conditions": conditions,
            "Resources": resources,
            "Outputs": self._outputs(),
        }

    # ------------------------------------------------------------------
    def collect_parameters(self, function: LambdaFunction) -> list[Parameter]:
        """First-occurrence union of environment, permission and event-source parameters."""
        collected: list[Parameter] = []
        for variable in function.environment:
            collected.extend(self.variable_parameters.to_parameters(variable))
        for permission in function.permissions:
            collected.extend(self.permission_parameters.to_parameters(permission))
        if function.event_source is not None:
            collected.extend(self.table_parameters.to_parameters(function.event_source))

        unique: list[Parameter] = []
        for parameter in collected:
            if parameter not in unique:
                unique.append(parameter)
        return unique

    def collect_conditions(self, function: LambdaFunction) -> list[ConditionDefinition]:
        collected: list[ConditionDefinition] = []
        for variable in function.environment:
            collected.extend(self.variable_conditions.to_conditions(variable))
        for permission in function.permissions:
            collected.extend(self.permission_conditions.to_conditions(permission))
        return collected

    def _check_reference_parameters(self, function: LambdaFunction) -> None:
        seen: dict[str, Any] = {}
        for reference in collect_output_references(function):
            name = parameter_for_reference(reference).name
            existing = seen.setdefault(name, reference)
            if existing != reference:
                raise ParameterCollisionError(name, existing, reference)

    def _compose_parameters(self, name: str, function: LambdaFunction) -> dict[str, Any]:
        parameters: dict[str, dict[str, Any]] = {
            ENV_PARAMETER: {"Type": "String"},
            RESOURCE_NAME_PARAMETER: {"Type": "String", "Default": name},
        }
        for parameter in self.collect_parameters(function):
            entry = parameters.setdefault(parameter.name, {"Type": "String"})
            # A later parameter without a default keeps the earlier one.
            if parameter.default_value is not None:
                entry["Default"] = parameter.default_value
        return parameters

    def _compose_conditions(self, function: LambdaFunction) -> dict[str, Any]:
        conditions: dict[str, Any] = {
            NO_ENV_CONDITION: fn_equals(ref(ENV_PARAMETER), NO_ENV_SENTINEL),
        }
        generated: dict[str, ConditionDefinition] = {}
        for condition in self.collect_conditions(function):
            existing = generated.setdefault(condition.name, condition)
            if existing != condition:
                raise ConditionCollisionError(condition.name, existing.block, condition.block)
            conditions[condition.name] = condition.block
        return conditions

    def _compose_resources(self, name: str, function: LambdaFunction) -> dict[str, Any]:
        resources: dict[str, Any] = {
            FUNCTION_RESOURCE: self._function_resource(name, function),
            ROLE_RESOURCE: self._role_resource(name),
            EXECUTION_POLICY_RESOURCE: self._execution_policy_resource(function),
        }
        if function.event_source is not None:
            resources[TRIGGER_POLICY_RESOURCE] = self._trigger_policy_resource(function.event_source)
            resources[EVENT_SOURCE_MAPPING_RESOURCE] = self._event_source_mapping_resource(function.event_source)
        return resources

    @staticmethod
    def _env_suffixed(base: str) -> dict[str, Any]:
        return fn_if(NO_ENV_CONDITION, base, fn_join("", [base, "-", ref(ENV_PARAMETER)]))

    def _environment_variables(self, function: LambdaFunction) -> dict[str, Any]:
        variables: dict[str, Any] = {
            "ENV": ref(ENV_PARAMETER),
            "REGION": ref("AWS::Region"),
        }
        for variable in function.environment:
            definition = self.variable_resolver.to_variable(variable)
            variables[definition.name] = definition.block
        return variables

    def _function_resource(self, name: str, function: LambdaFunction) -> dict[str, Any]:
        return {
            "Type": "AWS::Lambda::Function",
            "Metadata": {
                "aws:asset:path": self.asset_path,
                "aws:asset:property": "Code",
            },
            "Properties": {
                "Handler": self.handler,
                "FunctionName": self._env_suffixed(name),
                "Environment": {"Variables": self._environment_variables(function)},
                "Role": get_att(ROLE_RESOURCE, "Arn"),
                "Runtime": self.runtime,
                "Timeout": self.timeout,
            },
        }

    def _role_resource(self, name: str) -> dict[str, Any]:
        return {
            "Type": "AWS::IAM::Role",
            "Properties": {
                "RoleName": self._env_suffixed(f"{name}LambdaRole"),
                "AssumeRolePolicyDocument": {
                    "Version": "2012-10-17",
                    "Statement": [
                        {
                            "Effect": "Allow",
                            "Principal": {"Service": ["lambda.amazonaws.com"]},
                            "Action": ["sts:AssumeRole"],
                        }
                    ],
                },
            },
        }

    def _logs_statement(self) -> PolicyStatement:
        return PolicyStatement(  # type: ignore[call-arg]
            actions=list(LOG_ACTIONS),
            resources=fn_sub(
                "arn:aws:logs:${region}:${account}:log-group:/aws/lambda/${lambda}:log-stream:*",
                {
                    **region_and_account(),
                    "lambda": ref(FUNCTION_RESOURCE),
                },
            ),
        )

    def _execution_policy_resource(self, function: LambdaFunction) -> dict[str, Any]:
        statements = [self._logs_statement()]
        statements.extend(self.permission_policy.to_statement(permission) for permission in function.permissions)
        return {
            "DependsOn": [ROLE_RESOURCE],
            "Type": "AWS::IAM::Policy",
            "Properties": {
                "PolicyName": "lambda-execution-policy",
                "Roles": [ref(ROLE_RESOURCE)],
                "PolicyDocument": PolicyDoc(statements=statements).to_template(),  # type: ignore[call-arg]
            },
        }

    def _trigger_policy_resource(self, table: Table) -> dict[str, Any]:
        statement = PolicyStatement(  # type: ignore[call-arg]
            actions=list(STREAM_ACTIONS),
            resources=self.tables.stream_arn_expression(table),
        )
        return {
            "DependsOn": [ROLE_RESOURCE],
            "Type": "AWS::IAM::Policy",
            "Properties": {
                "PolicyName": "amplify-lambda-execution-policy",
                "Roles": [ref(ROLE_RESOURCE)],
                "PolicyDocument": PolicyDoc(statements=[statement]).to_template(),  # type: ignore[call-arg]
            },
        }

    def _event_source_mapping_resource(self, table: Table) -> dict[str, Any]:
        return {
            "Type": "AWS::Lambda::EventSourceMapping",
            "DependsOn": [TRIGGER_POLICY_RESOURCE, ROLE_RESOURCE],
            "Properties": {
                "BatchSize": 1,
                "MaximumBatchingWindowInSeconds": 1,
                "Enabled": True,
                "EventSourceArn": self.tables.stream_arn_expression(table),
                "FunctionName": get_att(FUNCTION_RESOURCE, "Arn"),
                "StartingPosition": "LATEST",
            },
        }

    @staticmethod
    def _outputs() -> dict[str, Any]:
        return {
            "Name": {"Value": ref(FUNCTION_RESOURCE)},
            "Arn": {"Value": get_att(FUNCTION_RESOURCE, "Arn")},
            "Region": {"Value": ref("AWS::Region")},
            "LambdaExecutionRole": {"Value": ref(ROLE_RESOURCE)},
        }


def build_template(name: str, function: LambdaFunction, **options: Any) -> dict[str, Any]:
    return TemplateAssembler(**options).build(name, function)


__all__ = ["TemplateAssembler", "build_template"]
