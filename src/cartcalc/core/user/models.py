from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class BonusUseRecord:
    bonus_code: str
    used_at: datetime | None = None


@dataclass(slots=True)
class User:
    name: str
    bonus_use_history: list[BonusUseRecord] = field(default_factory=list)

    def uses_of(self, bonus_code: str | None = None) -> int:
        if bonus_code is None:
            return len(self.bonus_use_history)
        return sum(1 for record in self.bonus_use_history if record.bonus_code == bonus_code)
