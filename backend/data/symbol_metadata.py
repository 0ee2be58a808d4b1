"""
Local company metadata for the symbol lookup endpoint.
Static table; no market data is fetched.
"""

SYMBOL_METADATA = {
    "AAPL": {"company_name": "Apple Inc.", "sector": "Technology"},
    "MSFT": {"company_name": "Microsoft Corporation", "sector": "Technology"},
    "GOOGL": {"company_name": "Alphabet Inc.", "sector": "Communication Services"},
    "GOOG": {"company_name": "Alphabet Inc.", "sector": "Communication Services"},
    "AMZN": {"company_name": "Amazon.com, Inc.", "sector": "Consumer Discretionary"},
    "NVDA": {"company_name": "NVIDIA Corporation", "sector": "Technology"},
    "META": {"company_name": "Meta Platforms, Inc.", "sector": "Communication Services"},
    "TSLA": {"company_name": "Tesla, Inc.", "sector": "Consumer Discretionary"},
    "BRK.B": {"company_name": "Berkshire Hathaway Inc.", "sector": "Financials"},
    "JPM": {"company_name": "JPMorgan Chase & Co.", "sector": "Financials"},
    "XOM": {"company_name": "Exxon Mobil Corporation", "sector": "Energy"},
    "JNJ": {"company_name": "Johnson & Johnson", "sector": "Health Care"},
    "V": {"company_name": "Visa Inc.", "sector": "Financials"},
    "WMT": {"company_name": "Walmart Inc.", "sector": "Consumer Staples"},
    "PG": {"company_name": "Procter & Gamble Company", "sector": "Consumer Staples"},
    "UNH": {"company_name": "UnitedHealth Group Incorporated", "sector": "Health Care"},
}


def get_symbol_metadata(symbol: str):
    """Metadata dict for a normalized symbol, or None."""
    return SYMBOL_METADATA.get(symbol)
