import pytest
from pydantic import ValidationError

from dex_book.models import Order, OrderBook, OrderBookResponse, to_wire


@pytest.mark.parametrize("amount", ["0", "1.5", "-3", "0.000000001", "1E+3", "152.310000"])
def test_order_accepts_decimal_strings(amount):
    order = Order(SellAmount=amount, BuyAmount="1", Exchange="Orca")

    assert order.sell_amount == amount


@pytest.mark.parametrize("amount", ["NaN", "Infinity", "-Infinity", "sNaN", "1_000", " 1.5", "1.5\n", "abc", ""])
def test_order_rejects_non_plain_amounts(amount):
    with pytest.raises(ValidationError):
        Order(SellAmount="1", BuyAmount=amount, Exchange="Orca")


def test_order_book_requires_both_lists():
    with pytest.raises(ValidationError):
        OrderBook.model_validate({})
    with pytest.raises(ValidationError):
        OrderBook.model_validate({"buyOrders": []})
    with pytest.raises(ValidationError):
        OrderBook.model_validate({"sellOrders": []})


def test_order_book_rejects_unknown_keys():
    with pytest.raises(ValidationError):
        OrderBook.model_validate({"buyOrders": [], "sellOrders": [], "response": {}})
    with pytest.raises(ValidationError):
        OrderBookResponse.model_validate({"response": {"buyOrders": [], "sellOrders": []}, "error": "x"})


def test_wire_format_uses_aliases():
    book = OrderBook.model_validate({"buyOrders": [{"SellAmount": "1", "BuyAmount": "2", "Exchange": "Orca"}], "sellOrders": []})

    assert to_wire(OrderBookResponse(response=book)) == {
        "response": {"buyOrders": [{"SellAmount": "1", "BuyAmount": "2", "Exchange": "Orca"}], "sellOrders": []},
    }
