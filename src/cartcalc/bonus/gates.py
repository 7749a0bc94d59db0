"""Eligibility gates that decide whether a bonus may run at all. None of them affect the amount."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import TypeAlias, assert_never

from cartcalc.core.user import User
from cartcalc.errors import ConfigurationError


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


# Time window


@dataclass(frozen=True, slots=True)
class NoTimeLimit:
    pass


@dataclass(frozen=True, slots=True)
class StartsAt:
    start: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_utc(self.start))


@dataclass(frozen=True, slots=True)
class Window:
    start: datetime
    duration: timedelta

    def __post_init__(self) -> None:
        if self.duration <= timedelta(0):
            raise ConfigurationError("must be positive", field="window.duration")
        object.__setattr__(self, "start", as_utc(self.start))

    @property
    def end(self) -> datetime:
        return self.start + self.duration


TimeLimit: TypeAlias = NoTimeLimit | StartsAt | Window


def time_includes(limit: TimeLimit, moment: datetime) -> bool:
    moment = as_utc(moment)
    match limit:
        case NoTimeLimit():
            return True
        case StartsAt(start=start):
            return start < moment
        case Window(start=start):
            return start < moment < limit.end
        case _:
            assert_never(limit)


# Use count


@dataclass(frozen=True, slots=True)
class Unlimited:
    pass


@dataclass(frozen=True, slots=True)
class MaxUses:
    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ConfigurationError("must not be negative", field="max_uses.count")


UseTimeLimit: TypeAlias = Unlimited | MaxUses


def is_exceed_max(limit: UseTimeLimit, user: User) -> bool:
    """The ceiling counts every redemption in the user's history, whatever the bonus."""
    match limit:
        case Unlimited():
            return False
        case MaxUses(count=count):
            return user.uses_of() >= count
        case _:
            assert_never(limit)


# User scope


@dataclass(frozen=True, slots=True)
class AnyUser:
    pass


@dataclass(frozen=True, slots=True)
class OnlyUser:
    name: str


UserRelatedLimit: TypeAlias = AnyUser | OnlyUser


def user_allowed(limit: UserRelatedLimit, user: User) -> bool:
    match limit:
        case AnyUser():
            return True
        case OnlyUser(name=name):
            return user.name == name
        case _:
            assert_never(limit)


class OptionalLimit(str, Enum):
    MANDATORY = "mandatory"
    OPTIONAL = "optional"


class VisibilityLimit(str, Enum):
    VISIBLE = "visible"
    HIDDEN = "hidden"


class BonusOrigin(str, Enum):
    POINTS_SYSTEM = "points_system"
    RETURN_COMPENSATION = "return_compensation"
    OUT_OF_STOCK_COMPENSATION = "out_of_stock_compensation"
    CUSTOMER_SERVICE_STAFF = "customer_service_staff"
    MARKETING_OPERATION_STAFF = "marketing_operation_staff"
