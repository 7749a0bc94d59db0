from .models import Attribute, BoughtSet, CatalogItem, Line, round_money, sum_amount, sum_count, to_decimal

__all__ = [
    "Attribute",
    "CatalogItem",
    "BoughtSet",
    "Line",
    "round_money",
    "sum_amount",
    "sum_count",
    "to_decimal",
]
