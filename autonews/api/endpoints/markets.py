from typing import List
from fastapi import APIRouter, Depends

from autonews.schemas.market import Quote
from autonews.services.markets import MarketService, get_market_service

router = APIRouter()

@router.get("", response_model=List[Quote], summary="Stock and coin quotes for the ticker")
async def list_quotes(service: MarketService = Depends(get_market_service)):
    """Sources that fail are left out; an empty list means no prices are available"""
    return await service.quotes()
