"""Tool, protocol, activity and demo endpoints.

- GET /mode, PUT /mode - active checkout protocol
- GET /tools - contract of the active tool set
- POST /tools/{name} - invoke an active tool
- GET /activity - recent activity, newest first
- POST /demo/search, /demo/add-first, /demo/checkout - demo helpers
"""

from typing import Any

from fastapi import APIRouter

from toolcart.api.schemas import (
    DemoCheckoutRequest,
    ModeResponse,
    ProtocolRequest,
    ToolCallRequest,
)
from toolcart.api.shop import ShopDep
from toolcart.application.confirmation import CallerContext, StaticConfirmation
from toolcart.infrastructure.activity import to_wire

router = APIRouter()


# ============================================================================
# Protocol
# ============================================================================


@router.get("/mode", response_model=ModeResponse, tags=["Tools"])
async def get_mode(shop: ShopDep) -> ModeResponse:
    """Active checkout protocol and installed tools."""
    return ModeResponse(
        protocol=shop.protocol,
        tools=[tool.name for tool in shop.tools.list_tools()],
    )


@router.put("/mode", response_model=ModeResponse, tags=["Tools"])
async def set_mode(body: ProtocolRequest, shop: ShopDep) -> ModeResponse:
    """Switch checkout protocol, reinstalling the tool set."""
    installed = await shop.observe(
        "ui:setProtocol",
        {"protocol": body.protocol.value},
        lambda: shop.set_protocol(body.protocol),
    )
    return ModeResponse(protocol=shop.protocol, tools=installed)


# ============================================================================
# Tools
# ============================================================================


@router.get("/tools", tags=["Tools"])
async def list_tools(shop: ShopDep) -> list[dict[str, Any]]:
    """Name, description, input schema and side effect of each active tool."""
    return shop.tools.describe()


@router.post("/tools/{name}", tags=["Tools"])
async def call_tool(name: str, body: ToolCallRequest, shop: ShopDep) -> Any:
    """Invoke an active tool with raw arguments."""
    confirmation = None if body.confirmed is None else StaticConfirmation(body.confirmed)
    return await shop.tools.invoke(
        name,
        body.arguments,
        CallerContext(confirmation=confirmation),
    )


# ============================================================================
# Activity
# ============================================================================


@router.get("/activity", tags=["Activity"])
async def list_activity(shop: ShopDep) -> list[dict[str, Any]]:
    """Recent activity entries, newest first."""
    return [entry.to_dict() for entry in shop.activity.entries()]


# ============================================================================
# Demo Helpers
# ============================================================================


@router.post("/demo/search", tags=["Demo"])
async def demo_search(shop: ShopDep) -> dict[str, Any]:
    """Run the demo search."""
    return to_wire(await shop.demo_search())


@router.post("/demo/add-first", tags=["Demo"])
async def demo_add_first(shop: ShopDep) -> dict[str, Any]:
    """Add the first product of the latest search to the cart."""
    return to_wire(await shop.demo_add_first())


@router.post("/demo/checkout", tags=["Demo"])
async def demo_checkout(body: DemoCheckoutRequest, shop: ShopDep) -> dict[str, Any]:
    """Check out with the active protocol."""
    context = CallerContext(confirmation=StaticConfirmation(body.confirmed), source="demo")
    return to_wire(await shop.demo_checkout(context))
