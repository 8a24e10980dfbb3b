"""Tool registry exposed to the completion provider."""

from typing import Any, Dict, List, Mapping, Optional, Type

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, ValidationError

from storefront.analytics.error_tracker import error_tracker
from storefront.analytics.logger import logger


class NoArguments(BaseModel):
    """Argument model for tools that take no input."""


class MCPTool:
    """Base class for tools the model may call during a completion.

    Subclasses set ``args_schema`` and implement ``execute``. Tools return a
    string for the model to read; failures are reported as human-readable
    strings, not exceptions.
    """

    args_schema: Type[BaseModel] = NoArguments

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description

    async def execute(self, **kwargs) -> str:
        """Execute the tool."""
        raise NotImplementedError

    def get_schema(self) -> Dict[str, Any]:
        """Get tool schema for LLM."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.get_parameters(),
        }

    def get_parameters(self) -> Dict[str, Any]:
        """Get parameter schema."""
        return self.args_schema.model_json_schema()


class MCPToolRegistry:
    """Explicit name -> tool mapping with argument validation."""

    def __init__(self):
        self.tools: Dict[str, MCPTool] = {}

    def register(self, tool: MCPTool):
        """Register a tool."""
        self.tools[tool.name] = tool
        logger.debug(f"Registered MCP tool: {tool.name}")

    def get_tool(self, name: str) -> Optional[MCPTool]:
        """Get a tool by name."""
        return self.tools.get(name)

    def list_tools(self) -> List[Dict[str, Any]]:
        """List all registered tools."""
        return [tool.get_schema() for tool in self.tools.values()]

    async def invoke(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> str:
        """Validate ``arguments`` against the tool's schema and run it."""
        tool = self.get_tool(name)
        if tool is None:
            logger.warning(f"Model requested unknown tool: {name}")
            return f"Unknown tool: {name}."

        try:
            args = tool.args_schema.model_validate(dict(arguments or {}))
        except ValidationError as e:
            logger.warning(f"Invalid arguments for tool {name}: {e}")
            return f"Invalid arguments for {name}: {e.error_count()} validation error(s)."

        try:
            return await tool.execute(**args.model_dump())
        except Exception as e:
            error_tracker.record_error("tool_error", str(e), {"tool": name})
            logger.error(f"Tool {name} failed: {e}", exc_info=True)
            return f"Unable to complete {name}."

    def as_langchain_tools(self) -> List[StructuredTool]:
        """Convert registered tools to LangChain StructuredTool instances."""
        return [self._to_structured_tool(tool) for tool in self.tools.values()]

    def _to_structured_tool(self, tool: MCPTool) -> StructuredTool:
        registry = self

        async def async_executor(**kwargs) -> str:
            return await registry.invoke(tool.name, kwargs)

        return StructuredTool(
            name=tool.name,
            description=tool.description,
            coroutine=async_executor,
            args_schema=tool.args_schema,
        )
