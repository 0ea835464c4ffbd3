"""Request and response schemas for the priced entrypoints."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema

from fx_intel.services.fx_conversion import normalize_currency, parse_symbols


class CurrencyCode(fields.String):
    """Three-letter currency code, trimmed and upper-cased on load."""

    def _deserialize(self, value, attr, data, **kwargs):
        raw = super()._deserialize(value, attr, data, **kwargs)
        try:
            return normalize_currency(raw)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc


class SymbolList(fields.String):
    """Comma-separated currency codes, loaded as a de-duplicated list."""

    def _deserialize(self, value, attr, data, **kwargs):
        raw = super()._deserialize(value, attr, data, **kwargs)
        try:
            symbols = parse_symbols(raw)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        if self.required and not symbols:
            raise ValidationError("At least one currency code is required.")
        return symbols

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return ",".join(value)


class InputSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class EmptyInputSchema(InputSchema):
    pass


class ConvertInputSchema(InputSchema):
    from_currency = CurrencyCode(
        required=True, data_key="from", metadata={"description": "Source currency code (e.g., USD)"}
    )
    to_currency = CurrencyCode(
        required=True, data_key="to", metadata={"description": "Target currency code (e.g., EUR)"}
    )
    amount = fields.Float(
        required=True,
        allow_nan=False,
        validate=validate.Range(min=0, min_inclusive=False, error="'amount' must be positive."),
        metadata={"description": "Amount to convert"},
    )

    @validates_schema
    def _currencies_differ(self, data, **kwargs):
        if data.get("from_currency") and data.get("from_currency") == data.get("to_currency"):
            raise ValidationError("'from' and 'to' must differ.", "to")


class RatesInputSchema(InputSchema):
    base = CurrencyCode(load_default="USD", metadata={"description": "Base currency code"})
    symbols = SymbolList(
        load_default=None,
        metadata={"description": "Comma-separated target currencies (e.g., EUR,GBP,JPY)"},
    )


class HistoricalInputSchema(InputSchema):
    on = fields.Date(
        required=True, data_key="date", metadata={"description": "Date in YYYY-MM-DD format"}
    )
    base = CurrencyCode(load_default="USD", metadata={"description": "Base currency"})
    symbols = SymbolList(load_default=None, metadata={"description": "Comma-separated currencies"})


class TimeseriesInputSchema(InputSchema):
    start_date = fields.Date(
        required=True, data_key="startDate", metadata={"description": "Start date (YYYY-MM-DD)"}
    )
    end_date = fields.Date(
        required=True, data_key="endDate", metadata={"description": "End date (YYYY-MM-DD)"}
    )
    base = CurrencyCode(load_default="USD", metadata={"description": "Base currency"})
    symbols = SymbolList(
        required=True, metadata={"description": "Comma-separated currencies (e.g., EUR,GBP)"}
    )

    @validates_schema
    def _ordered_range(self, data, **kwargs):
        start, end = data.get("start_date"), data.get("end_date")
        if start and end and start > end:
            raise ValidationError("'startDate' must not be after 'endDate'.", "startDate")


class ReportInputSchema(InputSchema):
    base = CurrencyCode(load_default="USD", metadata={"description": "Base currency"})


class AnalyticsInputSchema(InputSchema):
    window_ms = fields.Integer(
        load_default=None,
        data_key="windowMs",
        validate=validate.Range(min=0),
        metadata={"description": "Time window in ms"},
    )


class AnalyticsTransactionsInputSchema(AnalyticsInputSchema):
    limit = fields.Integer(load_default=50, validate=validate.Range(min=0))


# Request envelopes: {"input": {...}}. Entrypoints whose inputs are all
# optional accept a missing "input" object.


class OverviewRequestSchema(Schema):
    input = fields.Nested(EmptyInputSchema, load_default=dict)


class ConvertRequestSchema(Schema):
    input = fields.Nested(ConvertInputSchema, required=True)


class RatesRequestSchema(Schema):
    input = fields.Nested(RatesInputSchema, load_default=lambda: RatesInputSchema().load({}))


class HistoricalRequestSchema(Schema):
    input = fields.Nested(HistoricalInputSchema, required=True)


class TimeseriesRequestSchema(Schema):
    input = fields.Nested(TimeseriesInputSchema, required=True)


class ReportRequestSchema(Schema):
    input = fields.Nested(ReportInputSchema, load_default=lambda: ReportInputSchema().load({}))


class AnalyticsRequestSchema(Schema):
    input = fields.Nested(AnalyticsInputSchema, load_default=lambda: AnalyticsInputSchema().load({}))


class AnalyticsTransactionsRequestSchema(Schema):
    input = fields.Nested(
        AnalyticsTransactionsInputSchema,
        load_default=lambda: AnalyticsTransactionsInputSchema().load({}),
    )


class AnalyticsCsvRequestSchema(Schema):
    input = fields.Nested(AnalyticsInputSchema, load_default=lambda: AnalyticsInputSchema().load({}))


def _rate_map() -> fields.Dict:
    return fields.Dict(keys=fields.String(), values=fields.Float(allow_none=True), required=True)


class SampleRatesSchema(Schema):
    base = fields.String(required=True)
    date = fields.Date(required=True)
    rates = _rate_map()


class OverviewOutputSchema(Schema):
    source = fields.String(dump_default="European Central Bank (ECB)")
    currency_count = fields.Function(lambda obj: len(obj.currencies), data_key="currencyCount")
    supported_currencies = fields.Dict(
        keys=fields.String(), values=fields.String(), attribute="currencies",
        data_key="supportedCurrencies",
    )
    sample_rates = fields.Nested(SampleRatesSchema, attribute="sample", data_key="sampleRates")
    fetched_at = fields.DateTime(data_key="fetchedAt")


class ConvertOutputSchema(Schema):
    from_currency = fields.String(attribute="source_currency", data_key="from")
    to_currency = fields.String(attribute="target_currency", data_key="to")
    amount = fields.Float()
    rate = fields.Float()
    converted = fields.Float()
    date = fields.Date()
    source = fields.String(dump_default="ECB")


class RatesOutputSchema(Schema):
    base = fields.String()
    date = fields.Date()
    rates = _rate_map()
    rate_count = fields.Function(lambda obj: len(obj.rates), data_key="rateCount")
    source = fields.String(dump_default="ECB")


class HistoricalOutputSchema(Schema):
    base = fields.String()
    date = fields.Date()
    rates = _rate_map()
    source = fields.String(dump_default="ECB")


class SymbolStatsSchema(Schema):
    min = fields.Float()
    max = fields.Float()
    avg = fields.Float()
    change = fields.Float(allow_none=True)


class TimeseriesOutputSchema(Schema):
    base = fields.Function(lambda obj: obj.series.base)
    start_date = fields.Function(lambda obj: obj.series.start_date.isoformat(), data_key="startDate")
    end_date = fields.Function(lambda obj: obj.series.end_date.isoformat(), data_key="endDate")
    data_points = fields.Function(lambda obj: len(obj.series), data_key="dataPoints")
    stats = fields.Dict(keys=fields.String(), values=fields.Nested(SymbolStatsSchema))
    rates = fields.Function(lambda obj: obj.series.rates_by_date())
    source = fields.String(dump_default="ECB")


class SymbolReportSchema(Schema):
    current = fields.Float(allow_none=True)
    min30d = fields.Float(attribute="min")
    max30d = fields.Float(attribute="max")
    avg30d = fields.Float(attribute="avg")
    change30d = fields.Float(attribute="change", allow_none=True)
    volatility = fields.Float(allow_none=True)


class ReportPeriodSchema(Schema):
    start = fields.Date(attribute="period_start")
    end = fields.Date(attribute="period_end")


class ReportOutputSchema(Schema):
    base = fields.String()
    report_date = fields.Function(lambda obj: obj.latest.date.isoformat(), data_key="reportDate")
    source = fields.String(dump_default="European Central Bank (ECB)")
    available_currencies = fields.Integer(data_key="availableCurrencies")
    current_rates = fields.Function(lambda obj: dict(obj.latest.rates), data_key="currentRates")
    analysis = fields.Dict(
        keys=fields.String(), values=fields.Nested(SymbolReportSchema), data_key="analysis30Day"
    )
    period = fields.Function(lambda obj: ReportPeriodSchema().dump(obj))
    generated_at = fields.DateTime(data_key="generatedAt")


class AnalyticsSummaryOutputSchema(Schema):
    outgoing_total = fields.String(data_key="outgoingTotal")
    incoming_total = fields.String(data_key="incomingTotal")
    net_total = fields.String(data_key="netTotal")
    outgoing_count = fields.Integer(data_key="outgoingCount")
    incoming_count = fields.Integer(data_key="incomingCount")
    window_start = fields.String(allow_none=True, data_key="windowStart")
    window_end = fields.String(data_key="windowEnd")
    error = fields.String()
    payments = fields.List(fields.Dict())


class TransactionSchema(Schema):
    id = fields.String()
    timestamp = fields.String()
    direction = fields.String()
    entrypoint = fields.String()
    amount = fields.String()
    currency = fields.String()
    network = fields.String(allow_none=True)
    payer = fields.String(allow_none=True)
    transaction = fields.String(allow_none=True)


class AnalyticsTransactionsOutputSchema(Schema):
    transactions = fields.List(fields.Nested(TransactionSchema))


class AnalyticsCsvOutputSchema(Schema):
    csv = fields.String()


class OverviewResponseSchema(Schema):
    output = fields.Nested(OverviewOutputSchema, required=True)


class ConvertResponseSchema(Schema):
    output = fields.Nested(ConvertOutputSchema, required=True)


class RatesResponseSchema(Schema):
    output = fields.Nested(RatesOutputSchema, required=True)


class HistoricalResponseSchema(Schema):
    output = fields.Nested(HistoricalOutputSchema, required=True)


class TimeseriesResponseSchema(Schema):
    output = fields.Nested(TimeseriesOutputSchema, required=True)


class ReportResponseSchema(Schema):
    output = fields.Nested(ReportOutputSchema, required=True)


class AnalyticsSummaryResponseSchema(Schema):
    output = fields.Nested(AnalyticsSummaryOutputSchema, required=True)


class AnalyticsTransactionsResponseSchema(Schema):
    output = fields.Nested(AnalyticsTransactionsOutputSchema, required=True)


class AnalyticsCsvResponseSchema(Schema):
    output = fields.Nested(AnalyticsCsvOutputSchema, required=True)


class EntrypointPriceSchema(Schema):
    amount = fields.String(required=True)
    currency = fields.String(required=True)


class EntrypointSummarySchema(Schema):
    key = fields.String(required=True)
    description = fields.String(required=True)
    price = fields.Nested(EntrypointPriceSchema, required=True)


class EntrypointListSchema(Schema):
    entrypoints = fields.List(fields.Nested(EntrypointSummarySchema), required=True)
