"""Translate permissions into IAM policy statements."""

from __future__ import annotations

from typing import assert_never

from core.models import (
    IAMActionPermission,
    Permission,
    PolicyStatement,
    SendMailPermission,
    TableAction,
    TablePermission,
    UserPoolAction,
    UserPoolPermission,
    user_pool_output_reference,
)
from core.template.expressions import (
    TableDetails,
    expression_for_reference,
    fn_sub,
    region_and_account,
)

TABLE_ACTIONS: dict[str, str] = {
    "ReadItem": "dynamodb:GetItem",
    "UpdateItem": "dynamodb:UpdateItem",
}

SEND_MAIL_ACTION = "ses:SendEmail"


def policy_action_for_table_action(action: TableAction) -> str:
    return TABLE_ACTIONS[action]


def policy_action_for_user_pool_action(action: UserPoolAction) -> str:
    return f"cognito-idp:{action}"


class PermissionPolicy:
    """Compose exactly one Allow statement per permission."""

    def __init__(self, tables: TableDetails | None = None) -> None:
        self.tables = tables or TableDetails()

    def to_statement(self, permission: Permission) -> PolicyStatement:
        if isinstance(permission, TablePermission):
            return self._table_statement(permission)
        if isinstance(permission, UserPoolPermission):
            return self._user_pool_statement(permission)
        if isinstance(permission, SendMailPermission):
            return self._send_mail_statement(permission)
        if isinstance(permission, IAMActionPermission):
            return self._iam_action_statement(permission)
        assert_never(permission)

    # ------------------------------------------------------------------
    def _table_statement(self, permission: TablePermission) -> PolicyStatement:
        table_arn = fn_sub(
            "arn:aws:dynamodb:${region}:${account}:table/${tableName}",
            {
                **region_and_account(),
                "tableName": self.tables.name_expression(permission.table),
            },
        )
        return PolicyStatement(  # type: ignore[call-arg]
            actions=[policy_action_for_table_action(action) for action in permission.actions],
            resources=[table_arn],
        )

    def _user_pool_statement(self, permission: UserPoolPermission) -> PolicyStatement:
        user_pool_id = expression_for_reference(user_pool_output_reference(permission.user_pool, "UserPoolId"))
        user_pool_arn = fn_sub(
            "arn:aws:cognito-idp:${region}:${account}:userpool/${userPoolId}",
            {
                **region_and_account(),
                "userPoolId": user_pool_id,
            },
        )
        return PolicyStatement(  # type: ignore[call-arg]
            actions=[policy_action_for_user_pool_action(action) for action in permission.actions],
            resources=user_pool_arn,
        )

    @staticmethod
    def _send_mail_statement(permission: SendMailPermission) -> PolicyStatement:
        return PolicyStatement(  # type: ignore[call-arg]
            actions=[SEND_MAIL_ACTION],
            resources=fn_sub(f"${{{permission.identity.name}}}"),
        )

    @staticmethod
    def _iam_action_statement(permission: IAMActionPermission) -> PolicyStatement:
        return PolicyStatement(  # type: ignore[call-arg]
            actions=list(permission.actions),
            resources=[
                resource if isinstance(resource, str) else expression_for_reference(resource)
                for resource in permission.resources
            ],
        )


__all__ = [
    "PermissionPolicy",
    "SEND_MAIL_ACTION",
    "TABLE_ACTIONS",
    "policy_action_for_table_action",
    "policy_action_for_user_pool_action",
]
