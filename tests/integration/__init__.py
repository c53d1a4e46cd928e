"""
Integration Tests for DEX-Book

Test files:
- conftest.py: Pytest fixtures and test configuration
- test_get_orders.py: Proxy routes and the get_orders MCP tool
- test_order_source.py: HTTP and file-backed order sources
- test_viewer.py: Signing handshake, fetch flow, error states and stale responses
- test_pagination.py: Page slicing and Back/Next bounds
- test_attestation.py: Attestation message construction
- test_storage.py: Local key-value storage
- test_wallet.py: Wallet adapters and signature encoding
- test_display.py: Plain-text rendering of the order tables
- test_models.py: Wire schema and amount validation

All tests use mocked Solana RPC calls, temporary files and in-process HTTP transports
so no network or blockchain access is required.
"""

# Integration tests for dex-book
