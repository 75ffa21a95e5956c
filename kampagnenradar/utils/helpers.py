"""
Helper utilities
"""
from datetime import datetime, date, time
from typing import Any, Optional
import math
import re

import pandas as pd


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Safely divide two numbers"""
    try:
        return numerator / denominator if denominator != 0 else default
    except (TypeError, ZeroDivisionError):
        return default


def calculate_percentage_change(current: float, previous: float) -> Optional[float]:
    """Calculate percentage change between two values"""
    if previous == 0:
        return None
    return ((current - previous) / previous) * 100


def format_currency(amount: float, currency: str = "EUR") -> str:
    """Format amount as currency"""
    symbols = {"USD": "$", "EUR": "€", "GBP": "£"}
    symbol = symbols.get(currency, currency)
    return f"{symbol}{amount:,.2f}"


_NUMBER_CLEAN_RE = re.compile(r"[^0-9,.\-]")


def _is_thousands(s: str, sep: str) -> bool:
    """A lone separator is a thousands mark when exactly three digits follow it and the head is not 0."""
    if s.count(sep) > 1:
        return True
    head, _, tail = s.rpartition(sep)
    return len(tail) == 3 and head.lstrip("-") not in ("", "0")


def to_number(value: Any) -> float:
    """
    Lenient numeric conversion for spreadsheet cells.

    Never raises. Handles currency symbols, thousands separators and
    decimal commas:
        42          -> 42.0
        "1.234,56 €" -> 1234.56
        "1,234.56"  -> 1234.56
        "12,5"      -> 12.5
        "1.234"     -> 1234.0   (lone separator + three digits is thousands,
        "1,234"     -> 1234.0    for both "." and ",")
        "0.125"     -> 0.125
        "n/a"       -> 0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return 0.0 if math.isnan(value) or math.isinf(value) else float(value)

    s = _NUMBER_CLEAN_RE.sub("", str(value).strip())
    if not s or s in ("-", ".", ","):
        return 0.0

    if "," in s and "." in s:
        # Whichever separator comes last is the decimal mark
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    elif "," in s:
        s = s.replace(",", "") if _is_thousands(s, ",") else s.replace(",", ".")
    elif "." in s and _is_thousands(s, "."):
        s = s.replace(".", "")

    try:
        return float(s)
    except ValueError:
        return 0.0


def to_text(value: Any) -> str:
    """Lenient string conversion: None -> '', otherwise stripped str()."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def parse_row_date(value: Any) -> Optional[datetime]:
    """
    Parse a row-level date cell into a naive datetime.

    Accepts datetimes, dates, ISO strings and German/Portuguese style
    day-first strings ("18.10.2026", "18/10/2026"). Returns None for
    missing or unparsable values so callers can keep the row.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, (int, float)):
        return None

    s = str(value).strip()
    if not s:
        return None

    dayfirst = bool(re.match(r"^\d{1,2}[./]\d{1,2}[./]\d{2,4}", s))
    parsed = pd.to_datetime(s, errors="coerce", dayfirst=dayfirst)
    if parsed is None or pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert(None)
    return parsed.to_pydatetime()
