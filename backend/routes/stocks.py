"""
Stocks Routes - Symbol metadata lookup

Serves company name and sector from the local metadata table.
No quotes or market data; the calculator never depends on this endpoint.
"""
from fastapi import APIRouter, Query, HTTPException
import logging

from data.symbol_metadata import get_symbol_metadata
from models.schemas import SymbolInfoResponse
from utils.symbol_normalization import normalize_symbol

logger = logging.getLogger(__name__)

stocks_router = APIRouter(tags=["Stocks"])


@stocks_router.get("/symbol-info", response_model=SymbolInfoResponse)
async def get_symbol_info(symbol: str = Query("", description="Ticker, e.g. AAPL or BRK-B")):
    """
    Look up company metadata for a ticker.

    - 400 when the symbol is blank
    - 404 when the symbol is not in the local table
    """
    symbol = normalize_symbol(symbol)

    if not symbol:
        raise HTTPException(status_code=400, detail="Symbol is required.")

    details = get_symbol_metadata(symbol)
    if not details:
        logger.info(f"No local metadata for {symbol}")
        raise HTTPException(
            status_code=404,
            detail="No local company metadata available for this symbol yet."
        )

    return {
        "symbol": symbol,
        "company_name": details["company_name"],
        "sector": details["sector"],
    }
