"""Entrypoint pricing and the payment gate in front of paid entrypoints.

Settlement itself belongs to an injected :class:`SettlementHook`; this module
only knows prices, builds payment requirements, and records settled payments
with the analytics tracker.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from fx_intel.analytics import INCOMING, PaymentRecord, PaymentTracker
from fx_intel.catalog import ENTRYPOINTS, get_entrypoint
from fx_intel.errors import PaymentRequiredError, SettlementUnavailableError

logger = logging.getLogger(__name__)

PAYMENT_HEADER = "X-PAYMENT"
PAYMENT_RESPONSE_HEADER = "X-PAYMENT-RESPONSE"


def parse_price_overrides(raw: str | Mapping[str, Any] | None) -> Dict[str, int]:
    """Parse ``"key=amount,key=amount"`` (or a mapping) into price overrides."""

    if not raw:
        return {}
    if isinstance(raw, Mapping):
        items = list(raw.items())
    else:
        items = []
        for chunk in str(raw).split(","):
            if not chunk.strip():
                continue
            key, sep, amount = chunk.partition("=")
            if not sep:
                raise ValueError(f"Invalid price override {chunk!r}; expected key=amount")
            items.append((key, amount))

    overrides: Dict[str, int] = {}
    for key, amount in items:
        normalized_key = str(key).strip()
        get_entrypoint(normalized_key)
        value = int(str(amount).strip())
        if value < 0:
            raise ValueError(f"Price for '{normalized_key}' must not be negative")
        overrides[normalized_key] = value
    return overrides


@dataclass(frozen=True)
class PricingTable:
    """Fixed price per entrypoint, in the smallest unit of ``currency``."""

    prices: Mapping[str, int]
    currency: str = "USDC"
    network: Optional[str] = None
    pay_to: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "prices", MappingProxyType(dict(self.prices)))

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> PricingTable:
        prices = {entry.key: entry.default_price for entry in ENTRYPOINTS}
        prices.update(parse_price_overrides(config.get("ENTRYPOINT_PRICE_OVERRIDES")))
        return cls(
            prices=prices,
            currency=str(config.get("PAYMENTS_CURRENCY", "USDC")),
            network=config.get("PAYMENTS_NETWORK"),
            pay_to=config.get("PAYMENTS_PAY_TO"),
        )

    def amount_for(self, key: str) -> int:
        try:
            return self.prices[key]
        except KeyError as exc:
            raise KeyError(f"No price configured for entrypoint '{key}'") from exc

    def is_free(self, key: str) -> bool:
        return self.amount_for(key) == 0

    def requirements(self, key: str) -> Dict[str, Any]:
        return {
            "entrypoint": key,
            "amount": str(self.amount_for(key)),
            "currency": self.currency,
            "network": self.network,
            "payTo": self.pay_to,
        }


@dataclass(frozen=True)
class PaymentRequest:
    entrypoint: str
    amount: int
    currency: str
    network: Optional[str]
    pay_to: Optional[str]
    payment_header: str


@dataclass(frozen=True)
class PaymentReceipt:
    transaction: Optional[str] = None
    payer: Optional[str] = None
    network: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": True,
            "transaction": self.transaction,
            "payer": self.payer,
            "network": self.network,
        }
        payload.update(self.extra)
        return payload


class PaymentRejected(Exception):
    """Raised by a settlement hook when a payment cannot be accepted."""


@runtime_checkable
class SettlementHook(Protocol):
    def verify(self, request: PaymentRequest) -> None:
        """Raise :class:`PaymentRejected` if the payment cannot cover the request."""

    def settle(self, request: PaymentRequest) -> PaymentReceipt:
        """Collect a verified payment once the entrypoint has produced its output."""


class PaymentGate:
    """Authorizes paid entrypoint calls and settles them after success."""

    def __init__(
        self,
        pricing: PricingTable,
        *,
        enabled: bool,
        settlement: SettlementHook | None = None,
        tracker: PaymentTracker | None = None,
    ) -> None:
        self.pricing = pricing
        self.enabled = enabled
        self._settlement = settlement
        self._tracker = tracker

    def authorize(self, key: str, payment_header: str | None) -> PaymentRequest | None:
        """Return a pending request for a paid call, or None if nothing is owed."""

        amount = self.pricing.amount_for(key)
        if not self.enabled or amount == 0:
            return None

        requirements = self.pricing.requirements(key)
        if not payment_header:
            raise PaymentRequiredError(
                f"Payment of {amount} {self.pricing.currency} required for '{key}'.",
                payload={"accepts": [requirements]},
            )
        if self._settlement is None:
            raise SettlementUnavailableError("Payment settlement is not configured.")

        request = PaymentRequest(
            entrypoint=key,
            amount=amount,
            currency=self.pricing.currency,
            network=self.pricing.network,
            pay_to=self.pricing.pay_to,
            payment_header=payment_header,
        )
        try:
            self._settlement.verify(request)
        except PaymentRejected as exc:
            raise PaymentRequiredError(
                f"Payment rejected: {exc}", payload={"accepts": [requirements]}
            ) from exc
        return request

    def settle(self, request: PaymentRequest) -> PaymentReceipt:
        if self._settlement is None:
            raise SettlementUnavailableError("Payment settlement is not configured.")
        try:
            receipt = self._settlement.settle(request)
        except PaymentRejected as exc:
            raise PaymentRequiredError(
                f"Payment settlement failed: {exc}",
                payload={"accepts": [self.pricing.requirements(request.entrypoint)]},
            ) from exc

        logger.info(
            "Payment settled for %s",
            request.entrypoint,
            extra={
                "event": "payment.settled",
                "entrypoint": request.entrypoint,
                "amount": request.amount,
                "transaction": receipt.transaction,
            },
        )
        if self._tracker is not None:
            self._tracker.record(
                PaymentRecord(
                    direction=INCOMING,
                    amount=request.amount,
                    entrypoint=request.entrypoint,
                    currency=request.currency,
                    network=receipt.network or request.network,
                    payer=receipt.payer,
                    transaction=receipt.transaction,
                )
            )
        return receipt
