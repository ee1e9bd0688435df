"""Price and symbol formatting for alert text."""


def format_price(price: float) -> str:
    """
    Format a quote-currency price the way Binance displays it.

    Sub-dollar coins get 6 decimals, prices under 10 get 4, everything
    else 2, with thousands separators.
    """
    if price < 1:
        decimals = 6
    elif price < 10:
        decimals = 4
    else:
        decimals = 2

    return f"{price:,.{decimals}f}"


def base_symbol(symbol: str) -> str:
    """'BTC/USDT' -> 'BTC'."""
    return symbol.split("/")[0]
