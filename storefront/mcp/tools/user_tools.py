"""User profile MCP tool."""

import json

from storefront.analytics.telemetry import TelemetryClient
from storefront.mcp.mcp_client import MCPTool
from storefront.services.identity import AuthenticationContext


class GetUserInfoTool(MCPTool):
    """Expose the allow-listed profile fields of the signed-in user."""

    def __init__(self, auth_context: AuthenticationContext, telemetry: TelemetryClient):
        super().__init__(name="get_user_info", description="Gets information about the chat user")
        self.auth_context = auth_context
        self.telemetry = telemetry

    async def execute(self) -> str:
        self.telemetry.track_event(
            "aiFunc_GetUserInfo",
            properties={"TargetingId": self.auth_context.get_user_name() or ""},
        )
        return json.dumps(self.auth_context.get_profile())
