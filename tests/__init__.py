"""
Test Package for DEX-Book

This package contains the test suite for the DEX-Book proxy server and order book
viewer. The integration tests exercise the HTTP routes, the order sources, the wallet
signing handshake and the viewer's pagination against the real implementations, with
network access replaced by httpx mock and ASGI transports.

Test Structure:
- integration/: Integration tests for the proxy, viewer and supporting modules
- conftest.py: Pytest fixtures and configuration for testing
"""

# Test package for dex-book
