"""
Order book viewer.

Holds the client-side state of the DEX-Book page: the entered token address, the last
fetched order book and the page of it being shown. Fetching signs a minute-stamped
attestation message with the connected wallet and calls the proxy with the address,
the wallet's public key and the base58 signature (or the address alone when the wallet
cannot sign).
"""

import argparse
import asyncio
import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Sequence, TypeVar
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from mcp.server.fastmcp.utilities.logging import get_logger

from . import config
from .display import render_order_book
from .models import ErrorResponse, Order, OrderBook, OrderBookResponse
from .storage import JsonFileStore, KeyValueStore
from .wallet import KeypairWallet, WalletAdapter, encode_signature

logger = get_logger(__name__)

GREETING = "Welcome to DEX-Book!"
WALLET_STORAGE_KEY = "wallet"
TRADE_ROUTE = "/about"
MISSING_INPUT_ALERT = "Please enter a token address and connect your wallet"

T = TypeVar("T")

# --- Errors ---

class ViewerError(Exception):
    pass


class MissingInputError(ViewerError):
    pass


class SigningError(ViewerError):
    pass


class OrderFetchError(ViewerError):
    pass


class MalformedResponseError(OrderFetchError):
    pass

# --- Attestation message ---

def truncate_to_minute(now: datetime) -> datetime:
    return now.replace(second=0, microsecond=0)


def format_timestamp(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.astimezone()
    return f"{ts.strftime('%a %b %d %Y %H:%M:%S GMT%z')} ({ts.tzname()})"


def build_attestation_message(address: str, now: Optional[datetime] = None) -> str:
    """Builds the message the wallet signs. Identical for calls within the same minute."""
    ts = truncate_to_minute(now or datetime.now().astimezone())
    return f"{GREETING}\n\nToken Address: {address}\n\nTimestamp: {format_timestamp(ts)}"


def api_path(address: str, wallet: Optional[str] = None, signature: Optional[str] = None) -> str:
    path = f"/api/v1/getOrders/{quote(address, safe='')}"
    if wallet and signature:
        path += f"/{quote(wallet, safe='')}/{quote(signature, safe='')}"
    return path

# --- Pagination ---

def page_count(buy_total: int, sell_total: int, page_size: int = config.PAGE_SIZE) -> int:
    """Pages needed to show the longer of the two lists; never less than one."""
    return max(1, math.ceil(max(buy_total, sell_total) / page_size))


def page_slice(items: Sequence[T], page: int, page_size: int = config.PAGE_SIZE) -> List[T]:
    start = max(0, (page - 1) * page_size)
    end = min(len(items), start + page_size)
    return list(items[start:end])

# --- Viewer ---

@dataclass
class ViewerState:
    address: str = ""
    response: Optional[OrderBook] = None
    buy_orders: List[Order] = field(default_factory=list)
    sell_orders: List[Order] = field(default_factory=list)
    message: str = ""
    page: int = 1
    error: Optional[str] = None


@dataclass(frozen=True)
class FetchResult:
    ok: bool
    book: Optional[OrderBook] = None
    error: Optional[ViewerError] = None
    stale: bool = False


class OrderBookViewer:
    def __init__(
        self,
        wallet: WalletAdapter,
        http: httpx.AsyncClient,
        store: KeyValueStore,
        alert: Optional[Callable[[str], None]] = None,
        navigate: Optional[Callable[[str], None]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        page_size: int = config.PAGE_SIZE,
    ):
        self.wallet = wallet
        self.http = http
        self.store = store
        self.page_size = page_size
        self.state = ViewerState()
        self._alert = alert or (lambda msg: logger.warning(f"ALERT: {msg}"))
        self._navigate = navigate or (lambda route: logger.info(f"Navigating to {route}"))
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._generation = 0

    def set_address(self, address: str) -> None:
        self.state.address = address

    # --- Local storage ---

    def restore_wallet(self) -> None:
        """Rewrites the stored wallet value if one is present."""
        stored = self.store.get(WALLET_STORAGE_KEY)
        if stored:
            self.store.set(WALLET_STORAGE_KEY, stored)

    @property
    def stored_wallet(self) -> Optional[str]:
        stored = self.store.get(WALLET_STORAGE_KEY)
        if not stored:
            return None
        try:
            value = json.loads(stored)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring malformed stored wallet value: {stored!r}")
            return None
        return value if isinstance(value, str) else None

    # --- Fetching ---

    async def get_limit_orders(self) -> FetchResult:
        """Signs the attestation message, fetches the book and shows its first page."""
        address = self.state.address
        public_key = self.wallet.public_key
        if not address or public_key is None:
            self._alert(MISSING_INPUT_ALERT)
            return FetchResult(ok=False, error=MissingInputError(MISSING_INPUT_ALERT))

        self._generation += 1
        generation = self._generation
        message = build_attestation_message(address, self._clock())
        logger.info(f"Fetching orders for {address} (request #{generation})")

        try:
            signature = await self._sign(message)
            path = api_path(address, str(public_key), signature) if signature else api_path(address)
            book = await self._fetch(path)
        except ViewerError as e:
            logger.exception(f"Error fetching orders for {address}: {e}")
            if generation == self._generation:
                self.state.error = str(e)
            return FetchResult(ok=False, error=e, stale=generation != self._generation)

        if generation != self._generation:
            logger.debug(f"Discarding stale response for request #{generation}")
            return FetchResult(ok=False, book=book, stale=True)

        self._show(book, message)
        self.store.set(WALLET_STORAGE_KEY, json.dumps(str(public_key)))
        logger.info(f"Loaded {len(book.buy_orders)} buy / {len(book.sell_orders)} sell orders for {address}")
        return FetchResult(ok=True, book=book)

    refresh = get_limit_orders

    async def _sign(self, message: str) -> Optional[str]:
        if not self.wallet.can_sign:
            return None
        try:
            signature = await self.wallet.sign_message(message.encode("utf-8"))
            return encode_signature(signature)
        except Exception as e:
            raise SigningError(f"Error signing message: {e}") from e

    async def _fetch(self, path: str) -> OrderBook:
        try:
            resp = await self.http.get(path)
        except httpx.HTTPError as e:
            raise OrderFetchError(f"Request failed: {e}") from e

        if resp.status_code != 200:
            try:
                reason = ErrorResponse.model_validate(resp.json()).error
            except (ValueError, ValidationError):
                reason = f"HTTP {resp.status_code}"
            raise OrderFetchError(reason)

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(f"Invalid JSON from server (HTTP {resp.status_code})") from e

        try:
            return OrderBookResponse.model_validate(data).response
        except ValidationError as e:
            raise MalformedResponseError(f"Malformed order book response: {e.error_count()} invalid field(s)") from e

    def _show(self, book: OrderBook, message: str) -> None:
        self.state.response = book
        self.state.message = message
        self.state.page = 1
        self.state.error = None
        self._slice_page()
        logger.debug(f"Updated response: {book}")

    # --- Pagination ---

    def _slice_page(self) -> None:
        book = self.state.response
        if book is None:
            return
        self.state.buy_orders = page_slice(book.buy_orders, self.state.page, self.page_size)
        self.state.sell_orders = page_slice(book.sell_orders, self.state.page, self.page_size)

    @property
    def total_pages(self) -> int:
        book = self.state.response
        if book is None:
            return 1
        return page_count(len(book.buy_orders), len(book.sell_orders), self.page_size)

    @property
    def back_disabled(self) -> bool:
        return self.state.response is None or self.state.page <= 1

    @property
    def next_disabled(self) -> bool:
        return self.state.response is None or self.state.page >= self.total_pages

    def next_page(self) -> bool:
        if self.next_disabled:
            return False
        self.state.page += 1
        self._slice_page()
        return True

    def previous_page(self) -> bool:
        if self.back_disabled:
            return False
        self.state.page -= 1
        self._slice_page()
        return True

    def trade(self) -> None:
        self._navigate(TRADE_ROUTE)


async def run(address: str) -> None:
    wallet = KeypairWallet.from_env()
    await wallet.connect()
    store = JsonFileStore(config.STORAGE_FILE)
    try:
        async with httpx.AsyncClient(base_url=config.API_BASE_URL, timeout=config.REQUEST_TIMEOUT) as http:
            viewer = OrderBookViewer(wallet, http, store, alert=print)
            viewer.restore_wallet()
            viewer.set_address(address)
            await viewer.get_limit_orders()
            while True:
                print(render_order_book(viewer))
                cmd = (await asyncio.to_thread(input, "[n]ext [b]ack [r]efresh [t]rade [q]uit > ")).strip().lower()
                if cmd == "n":
                    viewer.next_page()
                elif cmd == "b":
                    viewer.previous_page()
                elif cmd == "r":
                    await viewer.refresh()
                elif cmd == "t":
                    viewer.trade()
                elif cmd == "q":
                    break
    finally:
        await wallet.disconnect()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Browse a token's limit orders through the DEX-Book proxy.")
    parser.add_argument("address", help="Token address to look up")
    args = parser.parse_args()
    # Example: python -m dex_book.viewer <TOKEN_ADDRESS>
    asyncio.run(run(args.address))
