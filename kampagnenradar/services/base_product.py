"""
Base-product extraction.

Variant SKUs and names carry colour/size as a suffix after a separator
("AB-100-red", "Shoe - Red | L"). Stripping the suffix recovers the
parent product so variants roll up into one record.

A separator at position 0 never counts as a split point, so "-AB" stays
"-AB" instead of collapsing to an empty id.
"""

SKU_SEPARATOR = "-"
NAME_SEPARATORS = ("-", "|")


def extract_base_id(sku: str) -> str:
    """
    Base SKU: everything before the variant suffix.

        "AB-100-red" -> "AB-100"
        "A-1"        -> "A"
        "AB"         -> "AB"
        "-AB"        -> "-AB"
    """
    if not sku:
        return ""
    idx = sku.rfind(SKU_SEPARATOR)
    if idx > 0:
        return sku[:idx].strip()
    return sku.strip()


def extract_base_name(name: str) -> str:
    """
    Base product name: text before the first '-' or '|'.

        "Shoe - Red | L" -> "Shoe"
        "Widget-Red"     -> "Widget"
        "Gadget"         -> "Gadget"
    """
    if not name:
        return ""
    positions = [name.find(sep) for sep in NAME_SEPARATORS]
    cut_points = [p for p in positions if p > 0]
    if cut_points:
        return name[:min(cut_points)].strip()
    return name.strip()
