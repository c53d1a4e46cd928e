"""
Wallet adapters.

A wallet exposes the connected public key and, when it supports it, signs arbitrary
message bytes. ``KeypairWallet`` holds a local solders keypair and checks the configured
Solana RPC endpoint on connect; ``WatchOnlyWallet`` knows a public key but cannot sign.
"""

from pathlib import Path
from typing import Optional

from solana.rpc.async_api import AsyncClient
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from mcp.server.fastmcp.utilities.logging import get_logger

from . import config

logger = get_logger(__name__)


class WalletError(Exception):
    pass


class WalletConnectionError(WalletError):
    pass


class SigningNotSupported(WalletError):
    pass


def encode_signature(signature: bytes) -> str:
    """Base58-encodes a 64-byte ed25519 signature."""
    return str(Signature.from_bytes(signature))


class WalletAdapter:
    """Base wallet: no key, no signing."""

    can_sign = False

    def __init__(self):
        self.connected = False

    @property
    def public_key(self) -> Optional[Pubkey]:
        return None

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def sign_message(self, message: bytes) -> bytes:
        raise SigningNotSupported(f"{type(self).__name__} cannot sign messages")


class WatchOnlyWallet(WalletAdapter):
    def __init__(self, pubkey: Pubkey):
        super().__init__()
        self._pubkey = pubkey

    @property
    def public_key(self) -> Optional[Pubkey]:
        return self._pubkey if self.connected else None


class KeypairWallet(WalletAdapter):
    can_sign = True

    def __init__(self, keypair: Keypair, rpc_endpoint: str = config.RPC_ENDPOINT):
        super().__init__()
        self.keypair = keypair
        self.rpc_endpoint = rpc_endpoint

    @classmethod
    def from_env(cls) -> "KeypairWallet":
        """Loads the keypair from WALLET_KEYPAIR (base58) or WALLET_KEYPAIR_PATH (JSON array)."""
        if config.WALLET_KEYPAIR:
            return cls(Keypair.from_base58_string(config.WALLET_KEYPAIR))
        if config.WALLET_KEYPAIR_PATH:
            raw = Path(config.WALLET_KEYPAIR_PATH).expanduser().read_text()
            return cls(Keypair.from_json(raw))
        raise WalletError("Set WALLET_KEYPAIR or WALLET_KEYPAIR_PATH to load a wallet.")

    @property
    def public_key(self) -> Optional[Pubkey]:
        return self.keypair.pubkey() if self.connected else None

    async def connect(self) -> None:
        async with AsyncClient(self.rpc_endpoint) as client:
            logger.debug(f"Connecting to RPC: {self.rpc_endpoint}")
            if not await client.is_connected():
                logger.error(f"Failed to connect to RPC endpoint: {self.rpc_endpoint}")
                raise WalletConnectionError(f"Could not connect to Solana RPC at {self.rpc_endpoint}")
        self.connected = True
        logger.info(f"Wallet {self.keypair.pubkey()} connected")

    async def sign_message(self, message: bytes) -> bytes:
        if not self.connected:
            raise WalletError("Wallet is not connected.")
        return bytes(self.keypair.sign_message(message))
