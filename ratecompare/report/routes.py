"""Report endpoints: JSON comparison and the plain-text table."""

from __future__ import annotations

from flask import Response
from flask.views import MethodView

from ratecompare.schemas import ReportQuerySchema, ReportResponseSchema
from ratecompare.services.report import build_configured_report, render_text

from . import blp


@blp.route("")
class ComparisonReportView(MethodView):
    @blp.arguments(ReportQuerySchema, location="query")
    @blp.response(200, ReportResponseSchema())
    def get(self, query_params):
        report = build_configured_report(
            days=query_params.get("days"),
            orientation=query_params.get("orientation"),
        )
        return {
            "pair": report.pair,
            "api_source": report.api_source,
            "card_source": report.card_source,
            "anchor_date": report.anchor_date,
            "requested_days": report.requested_days,
            "truncated": report.truncated,
            "rows": [
                {
                    "date": row.date,
                    "api_rate": row.api_rate,
                    "card_rate": row.card_rate,
                    "deviation_pct": row.deviation_pct,
                }
                for row in report.rows
            ],
            "average_api_rate": report.average_api_rate,
            "average_card_rate": report.average_card_rate,
            "average_deviation_pct": report.average_deviation_pct,
        }


@blp.route("/text")
class ComparisonReportText(MethodView):
    @blp.arguments(ReportQuerySchema, location="query")
    def get(self, query_params):
        report = build_configured_report(
            days=query_params.get("days"),
            orientation=query_params.get("orientation"),
        )
        return Response(render_text(report), mimetype="text/plain")
