"""Tool gateway: schema-described operations shared by every caller."""

from toolcart.tools.gateway import TOOL_NAMES, SideEffect, ToolDescriptor, ToolGateway

__all__ = ["TOOL_NAMES", "SideEffect", "ToolDescriptor", "ToolGateway"]
