"""
Symbol Normalization Utilities
==============================
Ensures consistent ticker formatting for metadata lookups.

Class shares are stored with a dot (BRK.B); users often type a dash or
slash (BRK-B, BRK/B). Everything is normalized to the dot form.
"""

# Symbol alias map: typed format -> canonical format
SYMBOL_ALIAS_MAP = {
    # Berkshire Hathaway
    "BRK-B": "BRK.B",
    "BRK/B": "BRK.B",
    "BRKB": "BRK.B",

    # Brown-Forman
    "BF-B": "BF.B",
    "BF/B": "BF.B",
    "BFB": "BF.B",
}


def normalize_symbol(symbol: str) -> str:
    """
    Normalize a symbol to canonical format.

    Args:
        symbol: Raw symbol string

    Returns:
        Normalized symbol (e.g., " brk-b " -> BRK.B), or "" for empty input
    """
    if not symbol:
        return ""

    # Uppercase and strip
    symbol = symbol.upper().strip()

    # Check alias map first
    if symbol in SYMBOL_ALIAS_MAP:
        return SYMBOL_ALIAS_MAP[symbol]

    # General normalization: single-letter class suffix after a dash or slash
    for separator in ("-", "/"):
        parts = symbol.split(separator)
        if len(parts) == 2 and len(parts[1]) == 1 and parts[0]:
            return f"{parts[0]}.{parts[1]}"

    return symbol
