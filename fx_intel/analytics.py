"""Payment tracking collaborator backing the analytics entrypoints."""

from __future__ import annotations

import csv
import io
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from fx_intel.utils.datetime import ensure_utc, utc_now, window_start

INCOMING = "incoming"
OUTGOING = "outgoing"
DIRECTIONS = {INCOMING, OUTGOING}

CSV_COLUMNS = (
    "id",
    "timestamp",
    "direction",
    "entrypoint",
    "amount",
    "currency",
    "network",
    "payer",
    "transaction",
)


@dataclass(frozen=True)
class PaymentRecord:
    """A settled payment, in the smallest unit of ``currency``."""

    direction: str
    amount: int
    entrypoint: str
    currency: str
    timestamp: datetime = field(default_factory=utc_now)
    network: Optional[str] = None
    payer: Optional[str] = None
    transaction: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Unknown payment direction {self.direction!r}")
        if self.amount < 0:
            raise ValueError("amount must not be negative")
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "direction": self.direction,
            "entrypoint": self.entrypoint,
            "amount": str(self.amount),
            "currency": self.currency,
            "network": self.network,
            "payer": self.payer,
            "transaction": self.transaction,
        }


@dataclass(frozen=True)
class PaymentSummary:
    outgoing_total: int
    incoming_total: int
    outgoing_count: int
    incoming_count: int
    window_start: Optional[datetime]
    window_end: datetime

    @property
    def net_total(self) -> int:
        return self.incoming_total - self.outgoing_total


@runtime_checkable
class PaymentTracker(Protocol):
    """Storage and aggregation of payments; ``window_ms=None`` means all time."""

    def record(self, payment: PaymentRecord) -> None: ...

    def summary(self, window_ms: Optional[int] = None) -> PaymentSummary: ...

    def transactions(self, window_ms: Optional[int] = None) -> List[PaymentRecord]: ...

    def export_csv(self, window_ms: Optional[int] = None) -> str: ...


class InMemoryPaymentTracker:
    """Process-local tracker; contents are lost on restart."""

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._records: List[PaymentRecord] = []

    def record(self, payment: PaymentRecord) -> None:
        with self._lock:
            self._records.append(payment)

    def summary(self, window_ms: Optional[int] = None) -> PaymentSummary:
        now = self._clock()
        start = window_start(now, window_ms)
        records = self._select(start)

        incoming = [record.amount for record in records if record.direction == INCOMING]
        outgoing = [record.amount for record in records if record.direction == OUTGOING]
        return PaymentSummary(
            outgoing_total=sum(outgoing),
            incoming_total=sum(incoming),
            outgoing_count=len(outgoing),
            incoming_count=len(incoming),
            window_start=start,
            window_end=now,
        )

    def transactions(self, window_ms: Optional[int] = None) -> List[PaymentRecord]:
        start = window_start(self._clock(), window_ms)
        return sorted(self._select(start), key=lambda record: record.timestamp, reverse=True)

    def export_csv(self, window_ms: Optional[int] = None) -> str:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, lineterminator="\n")
        writer.writeheader()
        for record in self.transactions(window_ms):
            row = record.to_dict()
            writer.writerow({column: row[column] or "" for column in CSV_COLUMNS})
        return buffer.getvalue()

    def _select(self, start: Optional[datetime]) -> List[PaymentRecord]:
        with self._lock:
            records = list(self._records)
        if start is None:
            return records
        return [record for record in records if record.timestamp >= start]
