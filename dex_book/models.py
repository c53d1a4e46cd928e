from decimal import Decimal, InvalidOperation
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Data Structures ---

class Order(BaseModel):
    """One resting order as returned by the external order source."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sell_amount: str = Field(..., alias="SellAmount") # Decimal string, never a float
    buy_amount: str = Field(..., alias="BuyAmount")
    exchange: str = Field(..., alias="Exchange")

    @field_validator("sell_amount", "buy_amount")
    @classmethod
    def _decimal_string(cls, value: str) -> str:
        try:
            amount = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"not a decimal amount: {value!r}")
        if not amount.is_finite() or value != value.strip() or "_" in value:
            raise ValueError(f"not a plain finite decimal amount: {value!r}")
        return value


class OrderBook(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    buy_orders: List[Order] = Field(..., alias="buyOrders")
    sell_orders: List[Order] = Field(..., alias="sellOrders")


class OrderBookResponse(BaseModel):
    """Success body of GET /api/v1/getOrders/..."""
    model_config = ConfigDict(extra="forbid")

    response: OrderBook


class ErrorResponse(BaseModel):
    error: str


def to_wire(model: BaseModel) -> dict:
    """Dumps a model using the JSON field names clients expect."""
    return model.model_dump(by_alias=True)
