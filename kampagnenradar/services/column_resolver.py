"""
Column Resolver

Maps arbitrary, multi-language sheet column labels (German, Portuguese,
English) onto canonical product fields by substring matching over
normalised keys.

Resolution is deliberately lenient: a missing column resolves to None and
callers fall back to a default. Nothing in here raises on dirty input.
"""
import re
import unicodedata
from typing import Any, Dict, Iterable, Mapping, Optional

from kampagnenradar.models.product import ResolvedRow
from kampagnenradar.services.base_product import extract_base_id, extract_base_name
from kampagnenradar.utils.helpers import parse_row_date, to_number, to_text

# Canonical field -> substring patterns (matched against normalised keys).
# Adding a synonym here is all it takes to support a new sheet layout.
COLUMN_PATTERNS: Dict[str, list] = {
    "sku": [
        "sku", "artikelnummer", "artikelnr", "artnr", "articlenumber",
        "articleno", "itemnumber", "itemno", "codigo", "referencia",
    ],
    "name": [
        "produktname", "productname", "artikelname", "bezeichnung",
        "produkt", "product", "produto", "nome", "name", "titel", "title",
    ],
    "units_sold": [
        "verkauft", "sold", "units", "verkaufsmenge", "absatzmenge",
        "quantidade", "quantity", "vendido", "vendas", "qty",
    ],
    "revenue": ["revenue", "receita", "umsatz", "faturamento", "erlos", "sales", "valor"],
    "stock_on_hand": ["bestand", "stock", "estoque", "lager", "inventory", "onhand"],
    "in_orders": [
        "inauftrag", "auftrag", "inorders", "reserviert", "reserved",
        "reservado", "pedidos", "committed",
    ],
    "available": ["verfugbar", "available", "disponivel", "disponible"],
    "sales_channel": [
        "shop", "kanal", "channel", "plattform", "platform", "marketplace",
        "loja", "canal",
    ],
    "date": ["datum", "date", "data"],
}

_CHANNEL_WORDS = ["channel", "kanal", "canal", "plattform", "platform", "marketplace"]

# Keys containing any of these are skipped for the field even when a
# pattern matches ("Sales Channel" is not revenue, "Bestandsmenge" is not units sold).
COLUMN_EXCLUDES: Dict[str, list] = {
    "units_sold": _CHANNEL_WORDS + [
        "bestand", "stock", "estoque", "lager", "inventory",
        "revenue", "umsatz", "receita", "valor",
    ],
    "revenue": _CHANNEL_WORDS + ["units", "qty", "menge", "quantity", "quantidade"],
}

_NON_KEY_CHARS = re.compile(r"[^a-z0-9_]")


def normalize_key(key: Any) -> str:
    """
    Normalise a column label for matching.

    Lower-cases, folds diacritics ("Verfügbar" -> "verfugbar") and drops
    every character outside [a-z0-9_].
    """
    s = str(key).strip().lower().replace("ß", "ss")
    s = unicodedata.normalize("NFKD", s)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    return _NON_KEY_CHARS.sub("", s)


def find_column(
    row: Mapping[str, Any],
    patterns: Iterable[str],
    excludes: Iterable[str] = (),
) -> Optional[Any]:
    """
    Return the first value whose normalised key contains any pattern.

    Keys are scanned in the row's own order; for each key every pattern is
    tried before moving on. Keys containing any of `excludes` are skipped.
    Returns None when nothing matches.
    """
    patterns = list(patterns)
    excludes = list(excludes)
    for key in row.keys():
        normalized = normalize_key(key)
        if not normalized or any(word in normalized for word in excludes):
            continue
        for pattern in patterns:
            if pattern in normalized:
                return row[key]
    return None


def resolve_field(row: Mapping[str, Any], field_name: str) -> Optional[Any]:
    """Resolve one canonical field using COLUMN_PATTERNS and COLUMN_EXCLUDES."""
    return find_column(
        row,
        COLUMN_PATTERNS.get(field_name, []),
        COLUMN_EXCLUDES.get(field_name, []),
    )


def resolve_row(row: Mapping[str, Any]) -> ResolvedRow:
    """
    Map one raw sheet row onto canonical fields.

    `available` comes from an explicit availability column when the sheet
    has one, otherwise it is stock on hand minus units tied up in orders.
    A row without a SKU resolves to an empty base id, which aggregation skips.
    """
    sku = to_text(resolve_field(row, "sku"))
    name = to_text(resolve_field(row, "name"))
    base_name = extract_base_name(name)
    base_id = extract_base_id(sku)

    stock_on_hand = to_number(resolve_field(row, "stock_on_hand"))
    in_orders = to_number(resolve_field(row, "in_orders"))
    available_raw = resolve_field(row, "available")
    if available_raw is None or to_text(available_raw) == "":
        available = stock_on_hand - in_orders
    else:
        available = to_number(available_raw)

    return ResolvedRow(
        base_id=base_id,
        base_name=base_name,
        sku=sku,
        name=name,
        units_sold=to_number(resolve_field(row, "units_sold")),
        revenue=to_number(resolve_field(row, "revenue")),
        stock_on_hand=stock_on_hand,
        in_orders=in_orders,
        available=available,
        sales_channel=to_text(resolve_field(row, "sales_channel")),
        date=parse_row_date(resolve_field(row, "date")),
    )
