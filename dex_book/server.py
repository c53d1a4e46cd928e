import json

from pydantic import Field
from starlette.requests import Request
from starlette.responses import JSONResponse

from mcp.server.fastmcp import Context, FastMCP
from mcp.server.fastmcp.utilities.logging import get_logger

from . import config
from .models import ErrorResponse, OrderBookResponse, to_wire
from .order_source import OrderSource, build_order_source

logger = get_logger(__name__)

# --- Server Setup ---
mcp = FastMCP(name="DEX-Book Server", host=config.SERVER_HOST, port=config.SERVER_PORT)

# Resolved at call time so tests can swap it out
order_source: OrderSource = build_order_source()

# --- Helper Functions ---

async def fetch_orders(address: str) -> tuple[dict, int]:
    """Asks the order source for a token's book. Returns (body, status)."""
    try:
        book = await order_source.get_orders(address)
    except Exception as e:
        logger.exception(f"Request failed for {address}: {e}")
        return to_wire(ErrorResponse(error=str(e))), 500
    logger.info(f"Returning {len(book.buy_orders)} buy / {len(book.sell_orders)} sell orders for {address}")
    return to_wire(OrderBookResponse(response=book)), 200

# --- HTTP Routes ---

@mcp.custom_route("/api/v1/getOrders/{address}", methods=["GET"])
@mcp.custom_route("/api/v1/getOrders/{address}/{wallet}/{signature}", methods=["GET"])
async def get_orders_route(request: Request) -> JSONResponse:
    """Relays a token address to the order source and returns its book as JSON."""
    address = request.path_params["address"]
    wallet = request.path_params.get("wallet")
    signature = request.path_params.get("signature")
    logger.info(f"Received getOrders request for address={address}, signed={signature is not None}")
    if signature is not None:
        # Accepted for the handshake; verification happens elsewhere.
        logger.debug(f"wallet={wallet} signature={signature}")

    body, status = await fetch_orders(address)
    return JSONResponse(body, status_code=status)

# --- MCP Tools ---

@mcp.tool()
async def get_orders(
    context: Context,
    address: str = Field(..., description="The token address to fetch buy and sell orders for."),
) -> str:
    """Retrieves the current buy and sell orders for a token address."""
    logger.debug(f"get_orders tool called for {address}")
    body, _ = await fetch_orders(address)
    return json.dumps(body, indent=2)


if __name__ == "__main__":
    print(f"Serving DEX-Book on http://{config.SERVER_HOST}:{config.SERVER_PORT}")
    # Example: python -m dex_book.server
    mcp.run(transport="sse")
