"""Marshmallow schemas for request bodies."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from faction_api.services.auth.service import USERNAME_PATTERN

_non_blank = validate.Length(min=1)


class _Body(Schema):
    class Meta:
        unknown = EXCLUDE


class LoginSchema(_Body):
    """Input payload for ``POST /login``."""

    username = fields.String(required=True, validate=_non_blank)
    password = fields.String(required=True, validate=_non_blank)


class RefreshSchema(_Body):
    """Input payload for ``POST /refresh``."""

    username = fields.String(required=True, validate=_non_blank)
    refresh_token = fields.String(required=True, data_key="refreshToken", validate=_non_blank)


class RegisterSchema(_Body):
    """Input payload for ``POST /users`` (registration)."""

    username = fields.String(
        required=True,
        validate=validate.Regexp(
            USERNAME_PATTERN,
            error="Username must be 3-32 characters of letters, digits, '_' or '-'.",
        ),
    )
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    faction_id = fields.String(required=True, data_key="factionId", validate=_non_blank)
    rank = fields.Integer(load_default=0, strict=True)


class LogoutSchema(_Body):
    refresh_token = fields.String(load_default=None, data_key="refreshToken")
    all_sessions = fields.Boolean(load_default=False, data_key="allSessions")


class RankSchema(_Body):
    rank = fields.Integer(required=True, strict=True)


class CodeSchema(_Body):
    code = fields.String(required=True, validate=_non_blank)


class LeaveRequestSchema(_Body):
    """Input payload for ``POST /leave-requests``."""

    discord_id = fields.String(required=True, data_key="discordId", validate=_non_blank)
    start_date = fields.String(required=True, data_key="startDate")
    end_date = fields.String(required=True, data_key="endDate")
