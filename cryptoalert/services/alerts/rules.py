"""
Alert Rule Engine

Turns an indicator snapshot plus the current price into BUY, SELL and
MONITORING alerts. Stateless: the output depends only on the inputs
(pass `now` for reproducible ids and timestamps).

Rules are evaluated independently, so one symbol can produce several
alerts in the same run.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from cryptoalert.schemas.alerts import (
    Alert,
    AlertIndicators,
    AlertLevels,
    AlertSet,
    AlertType,
    Confidence,
    MonitoringType,
)
from cryptoalert.schemas.indicators import (
    IndicatorSnapshot,
    IndicatorValues,
    InsufficientData,
    MACDValues,
    Significance,
)
from cryptoalert.schemas.market import Timeframe
from cryptoalert.services.alerts.formatting import base_symbol, format_price

# BUY / SELL
OVERSOLD_RSI = 30
OVERBOUGHT_RSI = 70
LOWER_BAND_TOLERANCE = 1.01
UPPER_BAND_TOLERANCE = 0.99
VOLUME_CONFIRMATION_PCT = 20
STOP_LOSS_CANDLES = 5
STOP_LOSS_MARGIN = 0.01
DEFAULT_LEVEL_OFFSET = 0.05

# MONITORING
LEVEL_PROXIMITY = 0.02  # 2% either side of a level
VOLUME_ANOMALY_PCT = 100
RECENT_PATTERN_CANDLES = 2
STRONG_TREND_ADX = 25
VERY_STRONG_TREND_ADX = 35


@dataclass(frozen=True)
class _Context:
    """Values shared by every rule during one evaluation."""

    symbol: str
    base: str
    timeframe: Timeframe
    price: float
    snapshot: IndicatorSnapshot
    created_at: datetime
    support: float
    resistance: float

    @property
    def indicators(self) -> IndicatorValues:
        return self.snapshot.indicators

    @property
    def stamp(self) -> int:
        return int(self.created_at.timestamp() * 1000)

    @property
    def price_text(self) -> str:
        return f"${format_price(self.price)}"


def _confidence(confirmations: int) -> Confidence:
    if confirmations >= 2:
        return Confidence.HIGH
    if confirmations >= 1:
        return Confidence.MEDIUM
    return Confidence.LOW


def macd_rising(macd: MACDValues) -> bool:
    """Positive histogram, or histogram above the previous period's."""
    if macd.histogram > 0:
        return True
    return macd.previous_histogram is not None and macd.histogram > macd.previous_histogram


def macd_falling(macd: MACDValues) -> bool:
    """Negative histogram, or histogram below the previous period's."""
    if macd.histogram < 0:
        return True
    return macd.previous_histogram is not None and macd.histogram < macd.previous_histogram


def _volume_above(indicators: IndicatorValues, threshold: float) -> bool:
    change = indicators.volume.volume_change
    return change is not None and change > threshold


def nearest_level(levels: list[float], price: float) -> Optional[float]:
    """Level closest to `price`, or None when there are no levels."""
    if not levels:
        return None
    return min(levels, key=lambda level: abs(price - level))


def _near(price: float, level: Optional[float]) -> bool:
    return level is not None and abs(price - level) / level <= LEVEL_PROXIMITY


def _monitoring_summary(ctx: _Context) -> AlertIndicators:
    ind = ctx.indicators
    return AlertIndicators(
        rsi=ind.rsi,
        macd="BULLISH" if ind.macd.histogram > 0 else "BEARISH",
        moving_averages="UPTREND" if ctx.price > ind.ema50 else "DOWNTREND",
        bollinger_bands="MIDDLE_BAND",
    )


def _alert(
    ctx: _Context,
    kind: str,
    alert_type: AlertType,
    confidence: Confidence,
    indicators: AlertIndicators,
    recommendation: str,
    stop_loss: Optional[float] = None,
    target: Optional[float] = None,
    monitoring_type: Optional[MonitoringType] = None,
) -> Alert:
    return Alert(
        id=f"{kind}-{ctx.base}-{ctx.timeframe.value}-{ctx.stamp}",
        symbol=ctx.symbol,
        type=alert_type,
        price=ctx.price,
        confidence=confidence,
        created_at=ctx.created_at,
        timeframe=ctx.timeframe,
        indicators=indicators,
        recommendation=recommendation,
        levels=AlertLevels(
            support=ctx.support,
            resistance=ctx.resistance,
            stop_loss=stop_loss,
            target=target,
        ),
        monitoring_type=monitoring_type,
    )


# =============================================================================
# BUY / SELL
# =============================================================================


def _buy_alert(ctx: _Context) -> Optional[Alert]:
    ind = ctx.indicators
    if ind.rsi >= OVERSOLD_RSI:
        return None

    by_macd = macd_rising(ind.macd)
    by_bollinger = ctx.price <= ind.bollinger.lower * LOWER_BAND_TOLERANCE
    by_volume = _volume_above(ind, VOLUME_CONFIRMATION_PCT)

    recommendation = (
        f"Buying opportunity for {ctx.base} with RSI in oversold territory "
        f"({ind.rsi}) and current price {ctx.price_text}."
    )
    if by_macd:
        recommendation += " MACD shows positive momentum."
    if by_bollinger:
        recommendation += " Price is testing the lower Bollinger band, suggesting oversold conditions."
    if by_volume:
        recommendation += f" Volume is up {ind.volume.volume_change:.1f}%, confirming buyer interest."

    bullish = [p for p in ind.patterns if p.significance == Significance.BULLISH]
    if bullish:
        recommendation += f" Candlestick pattern identified: {bullish[0].pattern}."

    recent_lows = [c.low for c in ctx.snapshot.candles[-STOP_LOSS_CANDLES:]]

    return _alert(
        ctx,
        kind="buy",
        alert_type=AlertType.BUY,
        confidence=_confidence(sum([by_macd, by_bollinger, by_volume])),
        indicators=AlertIndicators(
            rsi=ind.rsi,
            macd="BULLISH" if ind.macd.histogram > 0 else "BEARISH",
            moving_averages="UPTREND" if ctx.price > ind.ema50 else "DOWNTREND",
            bollinger_bands="LOWER_TOUCH" if ctx.price < ind.bollinger.lower else "MIDDLE_BAND",
        ),
        recommendation=recommendation,
        stop_loss=min(recent_lows) * (1 - STOP_LOSS_MARGIN),
        # Deeper oversold readings give a larger target offset
        target=ctx.price * (1 + (OVERSOLD_RSI - ind.rsi) / 100),
    )


def _sell_alert(ctx: _Context) -> Optional[Alert]:
    ind = ctx.indicators
    if ind.rsi <= OVERBOUGHT_RSI:
        return None

    by_macd = macd_falling(ind.macd)
    by_bollinger = ctx.price >= ind.bollinger.upper * UPPER_BAND_TOLERANCE
    by_volume = _volume_above(ind, VOLUME_CONFIRMATION_PCT)

    recommendation = (
        f"Selling opportunity for {ctx.base} with RSI in overbought territory "
        f"({ind.rsi}) and current price {ctx.price_text}."
    )
    if by_macd:
        recommendation += " MACD shows negative momentum."
    if by_bollinger:
        recommendation += " Price is testing the upper Bollinger band, suggesting overbought conditions."
    if by_volume:
        recommendation += f" Volume is up {ind.volume.volume_change:.1f}%, confirming selling pressure."

    bearish = [p for p in ind.patterns if p.significance == Significance.BEARISH]
    if bearish:
        recommendation += f" Candlestick pattern identified: {bearish[0].pattern}."

    recent_highs = [c.high for c in ctx.snapshot.candles[-STOP_LOSS_CANDLES:]]

    return _alert(
        ctx,
        kind="sell",
        alert_type=AlertType.SELL,
        confidence=_confidence(sum([by_macd, by_bollinger, by_volume])),
        indicators=AlertIndicators(
            rsi=ind.rsi,
            macd="BEARISH" if ind.macd.histogram < 0 else "BULLISH",
            moving_averages="DOWNTREND" if ctx.price < ind.ema50 else "UPTREND",
            bollinger_bands="UPPER_TOUCH" if ctx.price > ind.bollinger.upper else "MIDDLE_BAND",
        ),
        recommendation=recommendation,
        stop_loss=max(recent_highs) * (1 + STOP_LOSS_MARGIN),
        target=ctx.price * (1 - (ind.rsi - OVERBOUGHT_RSI) / 100),
    )


# =============================================================================
# MONITORING
# =============================================================================


def _monitoring_alerts(ctx: _Context) -> list[Alert]:
    ind = ctx.indicators
    levels = ind.support_resistance
    alerts = []

    def monitoring(kind: str, monitoring_type: MonitoringType, text: str,
                   confidence: Confidence = Confidence.MEDIUM) -> Alert:
        return _alert(
            ctx,
            kind=f"monitoring-{kind}",
            alert_type=AlertType.MONITORING,
            confidence=confidence,
            indicators=_monitoring_summary(ctx),
            recommendation=f"{text} Current price {ctx.price_text}.",
            monitoring_type=monitoring_type,
        )

    support = nearest_level(levels.support, ctx.price)
    if _near(ctx.price, support):
        alerts.append(monitoring(
            "support",
            MonitoringType.SUPPORT,
            f"{ctx.base} is testing an important support level at ${format_price(support)}.",
        ))

    resistance = nearest_level(levels.resistance, ctx.price)
    if _near(ctx.price, resistance):
        alerts.append(monitoring(
            "resistance",
            MonitoringType.RESISTANCE,
            f"{ctx.base} is testing an important resistance level at ${format_price(resistance)}.",
        ))

    if _volume_above(ind, VOLUME_ANOMALY_PCT):
        alerts.append(monitoring(
            "volume",
            MonitoringType.VOLUME,
            f"{ctx.base} shows unusual trading volume, "
            f"{ind.volume.volume_change:.1f}% above average.",
        ))

    latest = ctx.snapshot.candle_count - RECENT_PATTERN_CANDLES
    pattern = next(
        (
            p for p in ind.patterns
            if p.significance != Significance.NEUTRAL and p.position >= latest
        ),
        None,
    )
    if pattern is not None:
        direction = "bullish" if pattern.significance == Significance.BULLISH else "bearish"
        alerts.append(monitoring(
            "pattern",
            MonitoringType.PATTERN,
            f'{ctx.base} formed a "{pattern.pattern}" candlestick pattern ({direction}). '
            f"{pattern.description}.",
        ))

    if ind.adx.value > STRONG_TREND_ADX:
        direction = "uptrend" if ind.adx.plus_di > ind.adx.minus_di else "downtrend"
        alerts.append(monitoring(
            "trend",
            MonitoringType.TREND,
            f"{ctx.base} is in a strong {direction} (ADX: {ind.adx.value:.1f}).",
            confidence=Confidence.HIGH if ind.adx.value > VERY_STRONG_TREND_ADX else Confidence.MEDIUM,
        ))

    return alerts


# =============================================================================
# ENTRY POINT
# =============================================================================


def generate_alerts(
    symbol: str,
    snapshot: Union[IndicatorSnapshot, InsufficientData, None],
    current_price: Optional[float],
    timeframe: Union[Timeframe, str],
    now: Optional[datetime] = None,
) -> AlertSet:
    """
    Derive alerts from an indicator snapshot.

    A missing snapshot (InsufficientData or None) yields an empty set.
    `current_price` may come from a faster feed than the candles; when
    None the snapshot's last close is used.
    """
    if not isinstance(snapshot, IndicatorSnapshot):
        return AlertSet()

    price = current_price if current_price is not None else snapshot.last_price
    levels = snapshot.indicators.support_resistance

    ctx = _Context(
        symbol=symbol,
        base=base_symbol(symbol),
        timeframe=Timeframe(timeframe),
        price=price,
        snapshot=snapshot,
        created_at=now or datetime.now(timezone.utc),
        support=levels.support[0] if levels.support else price * (1 - DEFAULT_LEVEL_OFFSET),
        resistance=levels.resistance[0] if levels.resistance else price * (1 + DEFAULT_LEVEL_OFFSET),
    )

    alerts = AlertSet()

    buy = _buy_alert(ctx)
    if buy is not None:
        alerts.buy.append(buy)

    sell = _sell_alert(ctx)
    if sell is not None:
        alerts.sell.append(sell)

    alerts.monitoring.extend(_monitoring_alerts(ctx))

    return alerts
