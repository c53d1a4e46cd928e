"""
External order sources.

The proxy does not aggregate exchanges itself; it asks an order source for the book of
a token address. Two sources are provided: an HTTP aggregator reached with httpx, and a
JSON file keyed by token address for local use.
"""

import json
from pathlib import Path
from typing import Dict, Optional, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from mcp.server.fastmcp.utilities.logging import get_logger

from . import config
from .models import OrderBook

logger = get_logger(__name__)


class OrderSourceError(Exception):
    """Raised when an order source cannot produce a book for an address."""


class OrderSource(Protocol):
    async def get_orders(self, address: str) -> OrderBook:
        ...


class HttpOrderSource:
    """Fetches order books from an upstream aggregator at ``{base_url}/{address}``."""

    def __init__(self, base_url: str, timeout: float = config.ORDER_SOURCE_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport # Tests inject httpx.MockTransport

    async def get_orders(self, address: str) -> OrderBook:
        url = f"{self.base_url}/{quote(address, safe='')}"
        logger.debug(f"Requesting upstream order book: {url}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(url)
        except httpx.TimeoutException:
            raise OrderSourceError(f"order source timed out after {self.timeout}s")
        except httpx.HTTPError as e:
            raise OrderSourceError(f"order source unreachable: {e}")

        try:
            body = resp.json()
        except ValueError:
            raise OrderSourceError(f"order source returned invalid JSON (HTTP {resp.status_code})")

        if isinstance(body, dict) and "error" in body:
            raise OrderSourceError(str(body["error"]))
        if resp.status_code != 200:
            raise OrderSourceError(f"order source returned HTTP {resp.status_code}")

        try:
            return OrderBook.model_validate(body)
        except ValidationError as e:
            raise OrderSourceError(f"malformed order book from source: {e.error_count()} invalid field(s)")


class FileOrderSource:
    """Serves order books from a JSON file of ``{address: {"buyOrders": [...], "sellOrders": [...]}}``."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Dict[str, OrderBook]:
        """Loads the order books from the JSON file. Read errors yield an empty mapping."""
        try:
            if not self.path.exists():
                logger.info(f"Order book file {self.path} not found, no orders available.")
                return {}
            with open(self.path, 'r') as f:
                data = json.load(f)
            return {k: OrderBook.model_validate(v) for k, v in data.items()}
        except (json.JSONDecodeError, IOError, AttributeError, ValidationError) as e:
            logger.error(f"Error loading order book from {self.path}: {e}")
            return {}

    async def get_orders(self, address: str) -> OrderBook:
        books = self.load()
        if address not in books:
            raise OrderSourceError("not found")
        return books[address]


def build_order_source() -> OrderSource:
    if config.ORDER_SOURCE_URL:
        logger.info(f"Using HTTP order source at {config.ORDER_SOURCE_URL}")
        return HttpOrderSource(config.ORDER_SOURCE_URL)
    logger.info(f"Using file order source at {config.ORDER_BOOK_FILE}")
    return FileOrderSource(config.ORDER_BOOK_FILE)
