"""Analytics entrypoints delegating to the payment tracker.

When no tracker is attached the entrypoints still answer, with an empty
payload instead of an error response.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fx_intel.context import AgentContext

ANALYTICS_UNAVAILABLE = "Analytics not available"
DEFAULT_TRANSACTION_LIMIT = 50


def analytics_summary(ctx: AgentContext, window_ms: Optional[int] = None) -> Dict[str, Any]:
    if ctx.tracker is None:
        return {"error": ANALYTICS_UNAVAILABLE, "payments": []}

    summary = ctx.tracker.summary(window_ms)
    return {
        "outgoing_total": str(summary.outgoing_total),
        "incoming_total": str(summary.incoming_total),
        "net_total": str(summary.net_total),
        "outgoing_count": summary.outgoing_count,
        "incoming_count": summary.incoming_count,
        "window_start": summary.window_start.isoformat() if summary.window_start else None,
        "window_end": summary.window_end.isoformat(),
    }


def analytics_transactions(
    ctx: AgentContext,
    window_ms: Optional[int] = None,
    limit: int = DEFAULT_TRANSACTION_LIMIT,
) -> Dict[str, Any]:
    if ctx.tracker is None:
        return {"transactions": []}

    records = ctx.tracker.transactions(window_ms)[:limit]
    return {"transactions": [record.to_dict() for record in records]}


def analytics_csv(ctx: AgentContext, window_ms: Optional[int] = None) -> Dict[str, str]:
    if ctx.tracker is None:
        return {"csv": ""}
    return {"csv": ctx.tracker.export_csv(window_ms)}
