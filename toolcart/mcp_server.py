"""ToolCart MCP Server.

Exposes the shop's active tool set to AI agents over MCP (stdio). The
listed tools, their input schemas and read-only hints come straight from
the tool gateway, so agents see exactly what the active checkout protocol
installs.

Checkout confirmation is asked of the client through MCP elicitation when
the client supports it; otherwise the configured fallback answer is used.
"""

import asyncio
import json
from typing import Any

import structlog
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    ClientCapabilities,
    ElicitationCapability,
    TextContent,
    Tool,
    ToolAnnotations,
)

from toolcart.application.confirmation import CallerContext
from toolcart.domain.exceptions import DomainError
from toolcart.infrastructure.activity import ActivityLog
from toolcart.infrastructure.config import settings
from toolcart.infrastructure.logging import configure_logging
from toolcart.shop import Shop
from toolcart.tools.gateway import ToolDescriptor

logger = structlog.get_logger()

APPROVAL_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "approve": {
            "type": "boolean",
            "title": "Approve checkout",
            "description": "Charge the amount shown and place the order",
        },
    },
    "required": ["approve"],
}


class ElicitationConfirmation:
    """Ask the MCP client to approve a checkout.

    Args:
        session: MCP server session of the current request.
        fallback: Answer used when the client cannot elicit.
    """

    def __init__(self, session: Any, fallback: bool = False) -> None:
        self.session = session
        self.fallback = fallback

    def _client_can_elicit(self) -> bool:
        return self.session.check_client_capability(
            ClientCapabilities(elicitation=ElicitationCapability())
        )

    async def request_confirmation(self, prompt: str) -> bool:
        if not self._client_can_elicit():
            logger.info("Client cannot elicit, using fallback", approved=self.fallback)
            return self.fallback

        result = await self.session.elicit(message=prompt, requestedSchema=APPROVAL_SCHEMA)
        content = result.content or {}
        return result.action == "accept" and bool(content.get("approve"))


def to_mcp_tool(tool: ToolDescriptor) -> Tool:
    """MCP tool definition for a gateway tool."""
    return Tool(
        name=tool.name,
        description=tool.description,
        inputSchema=tool.input_schema,
        annotations=ToolAnnotations(readOnlyHint=tool.read_only),
    )


def format_result(result: Any) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(result, indent=2, default=str))]


def create_mcp_server(shop: Shop, confirmation_fallback: bool = False) -> Server:
    """Create the MCP server for a shop session."""
    server = Server("toolcart-mcp")

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List the active tools."""
        return [to_mcp_tool(tool) for tool in shop.tools.list_tools()]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        """Handle tool invocation."""
        logger.info("Tool called", tool=name, arguments=arguments)
        context = CallerContext(
            confirmation=ElicitationConfirmation(
                server.request_context.session,
                fallback=confirmation_fallback,
            ),
        )

        try:
            result = await shop.tools.invoke(name, arguments, context)
        except DomainError as e:
            logger.info("Tool failed", tool=name, error_code=e.error_code)
            return format_result({"success": False, "error": e.to_dict()})
        except Exception as e:
            logger.exception("Tool execution failed", tool=name)
            return format_result(
                {"success": False, "error": f"Tool execution failed: {str(e)}"}
            )

        logger.info("Tool completed", tool=name)
        return format_result(result)

    return server


async def run_server() -> None:
    """Run the MCP server using stdio transport."""
    shop = Shop(
        currency=settings.currency,
        protocol=settings.default_protocol,
        activity=ActivityLog(max_entries=settings.activity_log_size),
    )
    logger.info(
        "Starting ToolCart MCP Server",
        protocol=shop.protocol.value,
        tools=[tool.name for tool in shop.tools.list_tools()],
    )

    server = create_mcp_server(shop, confirmation_fallback=settings.confirmation_fallback)

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main() -> None:
    """Entry point for the MCP server."""
    configure_logging(settings.log_level, settings.log_json)
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
