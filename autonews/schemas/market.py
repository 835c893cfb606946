from pydantic import BaseModel, Field

class Quote(BaseModel):
    """行情报价"""
    key: str = Field(..., description="代码，例如 SPY 或 BTC")
    label: str
    price: float
    change_percent: float = 0.0
