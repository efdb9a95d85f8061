"""Schemas for API requests and responses."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from config import SUPPORTED_WINDOW_ORIENTATIONS


class HealthStatusSchema(Schema):
    status = fields.String(required=True)
    app = fields.String()
    database = fields.String()


class ReportQuerySchema(Schema):
    days = fields.Integer(load_default=None, validate=validate.Range(min=1, max=366))
    orientation = fields.String(
        load_default=None,
        validate=validate.OneOf(sorted(SUPPORTED_WINDOW_ORIENTATIONS)),
    )


class ReportRowSchema(Schema):
    date = fields.Date(required=True)
    api_rate = fields.Decimal(required=True, as_string=True)
    card_rate = fields.Decimal(required=True, as_string=True)
    deviation_pct = fields.Decimal(required=True, as_string=True, places=4)


class ReportResponseSchema(Schema):
    pair = fields.String(required=True)
    api_source = fields.String(required=True)
    card_source = fields.String(required=True)
    anchor_date = fields.Date(required=True)
    requested_days = fields.Integer(required=True)
    truncated = fields.Boolean(required=True)
    rows = fields.List(fields.Nested(ReportRowSchema), required=True)
    average_api_rate = fields.Decimal(allow_none=True, as_string=True)
    average_card_rate = fields.Decimal(allow_none=True, as_string=True)
    average_deviation_pct = fields.Decimal(allow_none=True, as_string=True, places=4)


class RateResponseSchema(Schema):
    source = fields.String(required=True)
    pair = fields.String(required=True)
    date = fields.Date(required=True)
    value = fields.Decimal(required=True, as_string=True)
    cached = fields.Boolean(required=True)


class ErrorMessageSchema(Schema):
    message = fields.String(required=True)
