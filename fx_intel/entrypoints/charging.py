"""Payment gating for entrypoint views."""

from __future__ import annotations

import base64
import json
from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import Response, g, request

from fx_intel.context import get_context
from fx_intel.payments import PAYMENT_HEADER, PAYMENT_RESPONSE_HEADER


def charged(key: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Require payment for ``key`` before the view runs; settle once it succeeds.

    Apply beneath the ``arguments``/``response`` decorators so that malformed
    input is rejected before any payment is verified.
    """

    def _decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            gate = get_context().payments
            g.entrypoint = key
            pending = gate.authorize(key, request.headers.get(PAYMENT_HEADER))
            result = func(*args, **kwargs)
            if pending is not None:
                g.payment_receipt = gate.settle(pending)
            return result

        return _wrapper

    return _decorator


def attach_payment_response(response: Response) -> Response:
    receipt = g.pop("payment_receipt", None)
    if receipt is not None:
        encoded = json.dumps(receipt.to_dict(), separators=(",", ":")).encode("utf-8")
        response.headers[PAYMENT_RESPONSE_HEADER] = base64.b64encode(encoded).decode("ascii")
    return response
