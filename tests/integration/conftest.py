import json
import sys
import types
from pathlib import Path
from typing import Any, Dict, Generator, List
from unittest.mock import MagicMock # For mocking Context

import httpx
import pytest
from pytest import MonkeyPatch
from solders.keypair import Keypair

# Ensure the package can be imported without installation
ROOT_DIR = Path(__file__).parent.parent.parent
sys.path.insert(0, str(ROOT_DIR))

import dex_book.server
from dex_book.order_source import FileOrderSource
from dex_book.storage import MemoryStore
from dex_book.wallet import KeypairWallet, WatchOnlyWallet

# --- Test Data Helpers ---

def make_orders(count: int, exchange: str = "Raydium", start: int = 0) -> List[Dict[str, str]]:
    """Builds `count` wire-format orders with distinguishable amounts."""
    return [
        {"SellAmount": f"{start + i}.5", "BuyAmount": f"{(start + i) * 2}.25", "Exchange": exchange}
        for i in range(count)
    ]


def write_order_book(path: Path, books: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(books, f, indent=4)

# --- Test Data Fixture ---

@pytest.fixture(scope="function")
def temp_order_book_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Creates a temporary directory and path for the order book JSON file."""
    temp_dir = tmp_path_factory.mktemp("dex_data")
    return temp_dir / "test_order_book.json"

# --- Mock Context Fixture ---
@pytest.fixture(scope="function")
def mock_context() -> MagicMock:
    """Provides a mock MCP Context object."""
    return MagicMock()

# --- Patched Server Module Fixture ---
@pytest.fixture(scope="function")
def patched_server_module(
    monkeypatch: MonkeyPatch, temp_order_book_path: Path
) -> Generator[types.ModuleType, None, None]:
    """Points the server's order source at a temporary order book file."""
    monkeypatch.setattr(dex_book.server, "order_source", FileOrderSource(temp_order_book_path))
    yield dex_book.server

# --- HTTP Fixtures ---
@pytest.fixture(scope="function")
def proxy_client(patched_server_module: types.ModuleType) -> httpx.AsyncClient:
    """An httpx client talking to the proxy's ASGI app in-process."""
    app = patched_server_module.mcp.sse_app()
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")

# --- Wallet Fixtures ---
@pytest.fixture(scope="function")
def signing_wallet() -> KeypairWallet:
    """A keypair wallet marked connected without touching RPC."""
    wallet = KeypairWallet(Keypair(), rpc_endpoint="http://localhost:8899")
    wallet.connected = True
    return wallet


@pytest.fixture(scope="function")
def watch_only_wallet() -> WatchOnlyWallet:
    wallet = WatchOnlyWallet(Keypair().pubkey())
    wallet.connected = True
    return wallet


@pytest.fixture(scope="function")
def memory_store() -> MemoryStore:
    return MemoryStore()
