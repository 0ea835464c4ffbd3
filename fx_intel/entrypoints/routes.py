"""Route handlers for the agent entrypoints."""

from __future__ import annotations

from flask.views import MethodView

from fx_intel.catalog import ENTRYPOINTS
from fx_intel.context import get_context
from fx_intel.services.payment_analytics import (
    analytics_csv,
    analytics_summary,
    analytics_transactions,
)
from fx_intel.services.rates import (
    build_overview,
    build_report,
    convert_currency,
    historical_rates,
    latest_rates,
    rate_timeseries,
)

from . import blp
from .charging import attach_payment_response, charged
from .schemas import (
    AnalyticsCsvRequestSchema,
    AnalyticsCsvResponseSchema,
    AnalyticsRequestSchema,
    AnalyticsSummaryResponseSchema,
    AnalyticsTransactionsRequestSchema,
    AnalyticsTransactionsResponseSchema,
    ConvertRequestSchema,
    ConvertResponseSchema,
    EntrypointListSchema,
    HistoricalRequestSchema,
    HistoricalResponseSchema,
    OverviewRequestSchema,
    OverviewResponseSchema,
    RatesRequestSchema,
    RatesResponseSchema,
    ReportRequestSchema,
    ReportResponseSchema,
    TimeseriesRequestSchema,
    TimeseriesResponseSchema,
)

blp.after_request(attach_payment_response)


@blp.route("")
class EntrypointList(MethodView):
    @blp.response(200, EntrypointListSchema())
    def get(self):
        pricing = get_context().pricing
        return {
            "entrypoints": [
                {
                    "key": entry.key,
                    "description": entry.description,
                    "price": {
                        "amount": str(pricing.amount_for(entry.key)),
                        "currency": pricing.currency,
                    },
                }
                for entry in ENTRYPOINTS
            ]
        }


@blp.route("/overview/invoke")
class OverviewEntrypoint(MethodView):
    @blp.arguments(OverviewRequestSchema)
    @blp.response(200, OverviewResponseSchema())
    @charged("overview")
    def post(self, payload):
        return {"output": build_overview(get_context())}


@blp.route("/convert/invoke")
class ConvertEntrypoint(MethodView):
    @blp.arguments(ConvertRequestSchema)
    @blp.response(200, ConvertResponseSchema())
    @charged("convert")
    def post(self, payload):
        data = payload["input"]
        result = convert_currency(
            get_context(),
            data["from_currency"],
            data["to_currency"],
            data["amount"],
        )
        return {"output": result}


@blp.route("/rates/invoke")
class RatesEntrypoint(MethodView):
    @blp.arguments(RatesRequestSchema)
    @blp.response(200, RatesResponseSchema())
    @charged("rates")
    def post(self, payload):
        data = payload["input"]
        return {"output": latest_rates(get_context(), data["base"], data.get("symbols"))}


@blp.route("/historical/invoke")
class HistoricalEntrypoint(MethodView):
    @blp.arguments(HistoricalRequestSchema)
    @blp.response(200, HistoricalResponseSchema())
    @charged("historical")
    def post(self, payload):
        data = payload["input"]
        snapshot = historical_rates(get_context(), data["on"], data["base"], data.get("symbols"))
        return {"output": snapshot}


@blp.route("/timeseries/invoke")
class TimeseriesEntrypoint(MethodView):
    @blp.arguments(TimeseriesRequestSchema)
    @blp.response(200, TimeseriesResponseSchema())
    @charged("timeseries")
    def post(self, payload):
        data = payload["input"]
        result = rate_timeseries(
            get_context(),
            data["start_date"],
            data["end_date"],
            data["base"],
            data["symbols"],
        )
        return {"output": result}


@blp.route("/report/invoke")
class ReportEntrypoint(MethodView):
    @blp.arguments(ReportRequestSchema)
    @blp.response(200, ReportResponseSchema())
    @charged("report")
    def post(self, payload):
        return {"output": build_report(get_context(), payload["input"]["base"])}


@blp.route("/analytics/invoke")
class AnalyticsEntrypoint(MethodView):
    @blp.arguments(AnalyticsRequestSchema)
    @blp.response(200, AnalyticsSummaryResponseSchema())
    @charged("analytics")
    def post(self, payload):
        return {"output": analytics_summary(get_context(), payload["input"]["window_ms"])}


@blp.route("/analytics-transactions/invoke")
class AnalyticsTransactionsEntrypoint(MethodView):
    @blp.arguments(AnalyticsTransactionsRequestSchema)
    @blp.response(200, AnalyticsTransactionsResponseSchema())
    @charged("analytics-transactions")
    def post(self, payload):
        data = payload["input"]
        output = analytics_transactions(get_context(), data["window_ms"], data["limit"])
        return {"output": output}


@blp.route("/analytics-csv/invoke")
class AnalyticsCsvEntrypoint(MethodView):
    @blp.arguments(AnalyticsCsvRequestSchema)
    @blp.response(200, AnalyticsCsvResponseSchema())
    @charged("analytics-csv")
    def post(self, payload):
        return {"output": analytics_csv(get_context(), payload["input"]["window_ms"])}
