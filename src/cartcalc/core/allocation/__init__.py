from .cheapest import bundle_bonus, consume_cheapest, sort_by_price, usable_count

__all__ = ["sort_by_price", "usable_count", "consume_cheapest", "bundle_bonus"]
