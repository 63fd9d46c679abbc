"""Display formatting for currency, percentages and ratios."""

from decimal import Decimal, ROUND_HALF_UP

from trade_journal.config import Config


def _round(value: float, decimals: int) -> Decimal:
    """Round half away from zero, without negative zero."""
    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)
    return rounded


def _localize(text: str, config: Config = Config) -> str:
    # Python renders "1,234.50"; swap in the configured separators
    return (
        text.replace(",", "\0")
        .replace(".", config.DECIMAL_SEP)
        .replace("\0", config.THOUSANDS_SEP)
    )


def format_number(value: float, decimals: int = 2, config: Config = Config) -> str:
    """Plain number with the configured decimal separator (no grouping)."""
    return _localize(f"{_round(value, decimals):.{decimals}f}", config)


def format_currency(
    value: float,
    decimals: int = 2,
    signed: bool = False,
    config: Config = Config,
) -> str:
    """Format an amount with thousands grouping and a trailing currency symbol.

    Parameters
    ----------
    value : float
        Amount to display.
    decimals : int
        0 for space-constrained cells (calendar), 2 for trade rows/tooltips.
    signed : bool
        Prefix ``+`` on non-negative amounts (calendar cells, weekly totals).
    config : Config
        Separators and currency symbol.
    """
    rounded = _round(value, decimals)
    text = _localize(f"{rounded:,.{decimals}f}", config)
    if signed and rounded >= 0:
        text = "+" + text
    return f"{text}{config.CURRENCY_SEP}{config.CURRENCY_SYMBOL}"


def format_percent(value: float, config: Config = Config) -> str:
    """Percentage with one decimal place, e.g. ``66,7%``."""
    return f"{format_number(value, 1, config)}%"


def profit_factor_label(profit_factor: float, config: Config = Config) -> str:
    """Qualitative rating shown under the profit factor."""
    if profit_factor > config.PF_EXCELLENT:
        return "Excellent"
    if profit_factor > config.PF_GOOD:
        return "Good"
    return "Needs work"
