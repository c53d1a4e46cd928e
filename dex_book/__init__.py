"""
DEX-Book Package

This package provides a small order book viewer for Solana tokens. A user connects a
wallet, enters a token address and signs a timestamped attestation message; the viewer
then asks the proxy server for the token's buy and sell orders and pages through them.

Main components:
- server.py: FastMCP server exposing the /api/v1/getOrders HTTP routes and MCP tool
- order_source.py: External order sources (HTTP aggregator or JSON file)
- viewer.py: Client-side state, signing handshake and pagination
- wallet.py: Wallet adapters backed by solders keypairs
- storage.py: Local key-value storage for the last connected wallet
"""

# DEX-Book
