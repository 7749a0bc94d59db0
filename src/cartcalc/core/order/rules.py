from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import Order


class RuleStage(str, Enum):
    ITEMS = "items"
    SHIPPING_FEE = "shipping_fee"


@dataclass(frozen=True, slots=True)
class EvaluationContext:
    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    opted_in: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class RuleOutcome:
    code: str
    applied: bool
    amount: Decimal = Decimal("0")
    reason: str | None = None

    @classmethod
    def skipped(cls, code: str, reason: str) -> RuleOutcome:
        return cls(code=code, applied=False, reason=reason)


class OrderRule(Protocol):
    """Anything that can contribute to an order's activity bonus."""

    code: str

    @property
    def stage(self) -> RuleStage: ...

    def apply_to_order(self, order: Order, context: EvaluationContext) -> RuleOutcome: ...
