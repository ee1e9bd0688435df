"""
Support / Resistance Detection

Finds local extrema in a candle series and clusters nearby ones into
price levels ranked by how often price touched them.
"""

from dataclasses import dataclass
from typing import Sequence

from cryptoalert.schemas.indicators import SupportResistance
from cryptoalert.schemas.market import Candle

GROUPING_THRESHOLD = 0.005  # 0.5% relative distance
MAX_LEVELS = 3
EDGE_MARGIN = 5  # candles skipped at each end of the series


@dataclass
class LevelGroup:
    """Cluster of nearby extrema."""

    price: float
    strength: int = 1


def group_levels(prices: Sequence[float], threshold: float = GROUPING_THRESHOLD) -> list[LevelGroup]:
    """
    Greedy single-pass clustering.

    A price joins the first group within `threshold` of that group's
    running weighted-average price; otherwise it starts a new group.
    Arrival order affects the result.
    """
    groups: list[LevelGroup] = []

    for price in prices:
        for group in groups:
            if abs(price - group.price) / group.price < threshold:
                total_weight = group.strength + 1
                group.price = (group.price * group.strength + price) / total_weight
                group.strength = total_weight
                break
        else:
            groups.append(LevelGroup(price=price))

    return groups


def _strongest(groups: list[LevelGroup]) -> list[float]:
    ranked = sorted(groups, key=lambda g: g.strength, reverse=True)
    return [round(g.price, 2) for g in ranked[:MAX_LEVELS]]


def find_support_resistance(candles: Sequence[Candle], lookback: int = 30) -> SupportResistance:
    """
    Support and resistance levels from local minima/maxima.

    A low is a support point when strictly lower than the two lows on each
    side; highs mirror this for resistance. Returns empty lists when the
    series is shorter than `lookback`.
    """
    if len(candles) < lookback:
        return SupportResistance()

    supports = []
    resistances = []

    for i in range(EDGE_MARGIN, len(candles) - EDGE_MARGIN):
        neighbours = (candles[i - 2], candles[i - 1], candles[i + 1], candles[i + 2])
        low = candles[i].low
        high = candles[i].high

        if all(low < c.low for c in neighbours):
            supports.append(low)
        if all(high > c.high for c in neighbours):
            resistances.append(high)

    return SupportResistance(
        support=_strongest(group_levels(supports)),
        resistance=_strongest(group_levels(resistances)),
    )
