"""Placeholder stock levels for products that only exist externally."""

from __future__ import annotations

import random

MIN_STOCK = 0
MAX_STOCK = 99


class StockSynthesizer:
    """Draw a uniformly distributed stock quantity in ``[0, 99]``.

    Values are never persisted by the synthesizer itself; they only become
    authoritative when a product is promoted to a local row.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def synthesize(self) -> int:
        return self.rng.randint(MIN_STOCK, MAX_STOCK)
