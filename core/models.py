"""Data models shared across the compiler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

_MODEL_CONFIG = {
    "frozen": True,
    "extra": "forbid",
    "populate_by_name": True,
}


# ---------------------------------------------------------------------------
# References and parameters


class ResourceOutputReference(BaseModel):
    """Named output of a resource managed by another stack, e.g. ``api/myAPI/GraphQLAPIIdOutput``."""

    category: str
    resource: str
    output: str

    model_config = _MODEL_CONFIG

    @property
    def key(self) -> str:
        return f"{self.category}-{self.resource}-{self.output}"

    @property
    def group_key(self) -> str:
        return f"{self.category}-{self.resource}"


class Parameter(BaseModel):
    """Template parameter supplied at deployment time."""

    name: str
    default_value: Optional[str] = Field(default=None, alias="defaultValue")

    model_config = _MODEL_CONFIG


class ApiTable(BaseModel):
    """DynamoDB table hosted inside a named AppSync API stack."""

    type: Literal["apiTable"] = "apiTable"
    api_name: str = Field(..., alias="apiName")
    table_name: str = Field(..., alias="tableName")

    model_config = _MODEL_CONFIG


Table = ApiTable


class UserPool(BaseModel):
    """Cognito user pool owned by an auth resource."""

    type: Literal["amplifyAuthUserPool"] = "amplifyAuthUserPool"
    auth_name: str = Field(..., alias="authName")

    model_config = _MODEL_CONFIG


UserPoolOutput = Literal["UserPoolId"]


def table_output_reference(table: Table) -> ResourceOutputReference:
    return ResourceOutputReference(category="api", resource=table.api_name, output="GraphQLAPIIdOutput")


def user_pool_output_reference(user_pool: UserPool, output: UserPoolOutput = "UserPoolId") -> ResourceOutputReference:
    return ResourceOutputReference(category="auth", resource=user_pool.auth_name, output=output)


# ---------------------------------------------------------------------------
# Permissions

TableAction = Literal["ReadItem", "UpdateItem"]
UserPoolAction = Literal[
    "ListUsers",
    "AdminCreateUser",
    "AdminGetUser",
    "AdminLinkProviderForUser",
    "AdminDeleteUser",
]


class TablePermission(BaseModel):
    type: Literal["TablePermission"] = "TablePermission"
    table: Table
    actions: tuple[TableAction, ...] = Field(..., min_length=1)

    model_config = _MODEL_CONFIG


class UserPoolPermission(BaseModel):
    type: Literal["UserPoolPermission"] = "UserPoolPermission"
    user_pool: UserPool = Field(..., alias="userPool")
    actions: tuple[UserPoolAction, ...] = Field(..., min_length=1)

    model_config = _MODEL_CONFIG


class SendMailPermission(BaseModel):
    type: Literal["SendMailPermission"] = "SendMailPermission"
    identity: Parameter

    model_config = _MODEL_CONFIG


class IAMActionPermission(BaseModel):
    """Escape hatch granting arbitrary IAM actions on literal ARNs or referenced outputs."""

    type: Literal["IAMActionPermission"] = "IAMActionPermission"
    actions: tuple[str, ...] = Field(..., min_length=1)
    resources: tuple[Union[str, ResourceOutputReference], ...]

    model_config = _MODEL_CONFIG


Permission = Annotated[
    Union[TablePermission, UserPoolPermission, SendMailPermission, IAMActionPermission],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Environment variables

VariableValue = Union[Parameter, ResourceOutputReference]


class TableNameVariable(BaseModel):
    type: Literal["TableNameVariable"] = "TableNameVariable"
    table: Table

    model_config = _MODEL_CONFIG


class ParameterVariable(BaseModel):
    type: Literal["ParameterVariable"] = "ParameterVariable"
    name: str
    parameter: Parameter

    model_config = _MODEL_CONFIG


class ResourceOutputVariable(BaseModel):
    type: Literal["ResourceOutputVariable"] = "ResourceOutputVariable"
    name: str
    reference: ResourceOutputReference

    model_config = _MODEL_CONFIG


class CoalescedVariable(BaseModel):
    """Resolves to ``first`` when it is non-empty at deploy time, otherwise ``second``."""

    type: Literal["CoalescedVariable"] = "CoalescedVariable"
    name: str
    first: VariableValue
    second: VariableValue

    model_config = _MODEL_CONFIG


EnvironmentVariable = Annotated[
    Union[TableNameVariable, ParameterVariable, ResourceOutputVariable, CoalescedVariable],
    Field(discriminator="type"),
]


class LambdaFunction(BaseModel):
    """Declarative description of one function and everything it depends on."""

    permissions: tuple[Permission, ...] = Field(default_factory=tuple)
    environment: tuple[EnvironmentVariable, ...] = Field(default_factory=tuple)
    event_source: Optional[Table] = Field(default=None, alias="eventSource")

    model_config = _MODEL_CONFIG


# ---------------------------------------------------------------------------
# Template fragments


@dataclass(frozen=True, slots=True)
class ConditionDefinition:
    name: str
    block: dict[str, Any]


@dataclass(frozen=True, slots=True)
class VariableDefinition:
    name: str
    block: Any


class PolicyStatement(BaseModel):
    """IAM policy statement whose resources may be CloudFormation expressions."""

    sid: str | None = Field(default=None, alias="Sid")
    effect: str = Field(default="Allow", alias="Effect")
    actions: list[str] = Field(default_factory=list, alias="Action")
    resources: Any = Field(default_factory=list, alias="Resource")

    model_config = {
        "populate_by_name": True,
    }

    def to_template(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PolicyDoc(BaseModel):
    """Policy document composed of IAM statements."""

    version: str = Field(default="2012-10-17", alias="Version")
    statements: list[PolicyStatement] = Field(default_factory=list, alias="Statement")

    model_config = {
        "populate_by_name": True,
    }

    def to_template(self) -> dict[str, Any]:
        return {
            "Version": self.version,
            "Statement": [statement.to_template() for statement in self.statements],
        }


__all__ = [
    "ApiTable",
    "CoalescedVariable",
    "ConditionDefinition",
    "EnvironmentVariable",
    "IAMActionPermission",
    "LambdaFunction",
    "Parameter",
    "ParameterVariable",
    "Permission",
    "PolicyDoc",
    "PolicyStatement",
    "ResourceOutputReference",
    "ResourceOutputVariable",
    "SendMailPermission",
    "Table",
    "TableAction",
    "TableNameVariable",
    "TablePermission",
    "UserPool",
    "UserPoolAction",
    "UserPoolPermission",
    "VariableDefinition",
    "VariableValue",
    "table_output_reference",
    "user_pool_output_reference",
]
