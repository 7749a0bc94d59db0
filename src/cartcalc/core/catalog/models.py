from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

Line = tuple["CatalogItem", int]


def to_decimal(value: Decimal | str | int, field_name: str = "amount") -> Decimal:
    """Parse a currency value exactly; floats are rejected to avoid binary rounding."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise TypeError(f"{field_name} must be a Decimal, str or int, got {type(value).__name__}")
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"{field_name} is not a decimal value: {value!r}") from exc


def round_money(value: Decimal, quantum: Decimal) -> Decimal:
    """Round for presentation only; amounts stay exact everywhere else."""
    return value.quantize(quantum, rounding=ROUND_HALF_UP)


@dataclass(frozen=True, slots=True)
class Attribute:
    id: int
    name: str


@dataclass(frozen=True, slots=True, eq=False)
class CatalogItem:
    """
    A purchasable product. Identity is the SKU name only: two items with the
    same name are the same catalog entry whatever their other fields say.
    """

    name: str
    price: Decimal
    weight: int = 0
    attributes: frozenset[Attribute] = field(default_factory=frozenset)
    market_price: Decimal | None = None

    def __post_init__(self) -> None:
        price = to_decimal(self.price, "price")
        if price < 0:
            raise ValueError(f"price of {self.name} must not be negative")
        if self.weight < 0:
            raise ValueError(f"weight of {self.name} must not be negative")
        object.__setattr__(self, "price", price)
        object.__setattr__(self, "attributes", frozenset(self.attributes))
        if self.market_price is not None:
            object.__setattr__(self, "market_price", to_decimal(self.market_price, "market_price"))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CatalogItem):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


class BoughtSet:
    """Multiset of catalog items with strictly positive quantities."""

    def __init__(self, lines: Iterable[Line] | None = None):
        self._lines: dict[CatalogItem, int] = {}
        for item, quantity in lines or ():
            self.add(item, quantity)

    def add(self, item: CatalogItem, quantity: int = 1) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"quantity of {item.name} must be an int")
        if quantity <= 0:
            raise ValueError(f"quantity of {item.name} must be positive, got {quantity}")
        self._lines[item] = self._lines.get(item, 0) + quantity

    def quantity_of(self, item: CatalogItem) -> int:
        return self._lines.get(item, 0)

    def lines(self) -> list[Line]:
        return list(self._lines.items())

    def filter(self, predicate: Callable[[CatalogItem], bool]) -> list[Line]:
        return [(item, quantity) for item, quantity in self._lines.items() if predicate(item)]

    def intersect(self, other: BoughtSet) -> list[Line]:
        return self.filter(lambda item: item in other._lines)

    def intersect_by_names(self, names: Iterable[str]) -> list[Line]:
        wanted = set(names)
        return self.filter(lambda item: item.name in wanted)

    def total_amount(self) -> Decimal:
        return sum_amount(self._lines.items())

    def total_count(self) -> int:
        return sum_count(self._lines.items())

    def total_weight(self) -> int:
        return sum(item.weight * quantity for item, quantity in self._lines.items())

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines())

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, item: object) -> bool:
        return item in self._lines

    def __repr__(self) -> str:
        body = ", ".join(f"{item.name}x{quantity}" for item, quantity in self._lines.items())
        return f"BoughtSet({body})"


def sum_amount(lines: Iterable[Line]) -> Decimal:
    return sum((item.price * quantity for item, quantity in lines), Decimal("0"))


def sum_count(lines: Iterable[Line]) -> int:
    return sum(quantity for _, quantity in lines)
