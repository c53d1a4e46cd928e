import os
from pathlib import Path

from dotenv import load_dotenv
from mcp.server.fastmcp.utilities.logging import get_logger

# Load environment variables from .env file in the repository root
dotenv_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=dotenv_path)

logger = get_logger(__name__)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r}, using default {default}")
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r}, using default {default}")
        return default


RPC_ENDPOINT = os.getenv("RPC_ENDPOINT", "https://api.mainnet-beta.solana.com")

# Proxy server
SERVER_HOST = os.getenv("SERVER_HOST", "127.0.0.1")
SERVER_PORT = _int_env("SERVER_PORT", 8000)
ORDER_SOURCE_URL = os.getenv("ORDER_SOURCE_URL")  # unset -> file-backed source
ORDER_BOOK_FILE = Path(__file__).parent.parent / os.getenv("ORDER_BOOK_FILE", "data/order_book.json")
ORDER_SOURCE_TIMEOUT = _float_env("ORDER_SOURCE_TIMEOUT", 15.0)

# Viewer
API_BASE_URL = os.getenv("API_BASE_URL", f"http://{SERVER_HOST}:{SERVER_PORT}")
REQUEST_TIMEOUT = _float_env("REQUEST_TIMEOUT", 30.0)
STORAGE_FILE = Path(__file__).parent.parent / os.getenv("STORAGE_FILE", "data/local_storage.json")
WALLET_KEYPAIR = os.getenv("WALLET_KEYPAIR")  # base58 secret key
WALLET_KEYPAIR_PATH = os.getenv("WALLET_KEYPAIR_PATH")  # solana-keygen JSON file
PAGE_SIZE = 10
