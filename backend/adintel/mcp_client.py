"""
MCP Clients
Connects to the browser-automation (Puppeteer) and knowledge-graph (Memory) MCP servers
via Streamable HTTP transport. These are the remote implementations of the Creative
Source and Intelligence Store capabilities.
"""

import json
import logging
from typing import Any, Optional
from mcp.client.streamable_http import streamablehttp_client
from mcp import ClientSession

logger = logging.getLogger(__name__)


class MCPToolClient:
    """
    Thin wrapper around one MCP server endpoint.
    Each call opens a session, initializes it, runs the tool(s) and closes it.
    """

    def __init__(self, url: str, headers: Optional[dict[str, str]] = None):
        if not url:
            raise ValueError("MCP server URL is required")
        self.url = url
        self.extra_headers = dict(headers or {})

    @property
    def headers(self) -> dict[str, str]:
        h = {"Accept": "application/json, text/event-stream"}
        h.update(self.extra_headers)
        return h

    async def call_tool(self, tool_name: str, arguments: dict[str, Any] = None) -> Any:
        """Call a single MCP tool and return the parsed result."""
        if arguments is None:
            arguments = {}

        logger.info(f"MCP call: {tool_name} with args keys: {list(arguments.keys())}")

        try:
            async with streamablehttp_client(url=self.url, headers=self.headers) as (
                read_stream,
                write_stream,
                _,
            ):
                async with ClientSession(read_stream, write_stream) as session:
                    await session.initialize()
                    result = await session.call_tool(tool_name, arguments)
                    return self._parse_result(result, tool_name)
        except MCPError:
            raise
        except Exception as e:
            logger.error(f"MCP tool call failed: {tool_name} - {str(e)}")
            raise MCPError(f"Failed to call {tool_name}: {str(e)}")

    # ── Helpers ───────────────────────────────────────────────────────

    @staticmethod
    def _parse_result(result, tool_name: str = "") -> Any:
        """Parse an MCP tool result into plain Python data."""
        if getattr(result, "isError", False):
            detail = " ".join(
                part.text for part in getattr(result, "content", []) or [] if hasattr(part, "text")
            )
            raise MCPError(f"{tool_name or 'MCP tool'} returned an error: {detail[:500]}")
        if hasattr(result, "content"):
            content_parts = []
            for part in result.content:
                if hasattr(part, "text"):
                    content_parts.append(part.text)
                elif hasattr(part, "data"):
                    content_parts.append(part.data)
            if len(content_parts) == 1:
                text = content_parts[0]
                try:
                    parsed = json.loads(text)
                    if isinstance(parsed, list):
                        logger.info(f"MCP response is a list with {len(parsed)} items")
                    elif isinstance(parsed, dict):
                        logger.info(f"MCP response keys: {list(parsed.keys())}")
                    return parsed
                except (json.JSONDecodeError, TypeError):
                    logger.debug(f"MCP response not valid JSON: {str(text)[:200]}")
                    return {"result": text}
            logger.info(f"MCP response has {len(content_parts)} content parts")
            return {"result": content_parts}
        return {"result": str(result)}


class MCPError(Exception):
    """Custom exception for MCP-related errors."""
    pass


# ══════════════════════════════════════════════════════════════════════
#  Creative Source — Puppeteer MCP server
# ══════════════════════════════════════════════════════════════════════

EXECUTION_RESULT_PREFIX = "Execution result:"


class PuppeteerMCP(MCPToolClient):
    """Browser automation via the Puppeteer MCP server (puppeteer_navigate / puppeteer_evaluate)."""

    async def navigate(self, url: str) -> dict:
        result = await self.call_tool("puppeteer_navigate", {"url": url})
        return self._navigation_status(result, url)

    async def evaluate(self, script: str) -> dict:
        result = await self.call_tool("puppeteer_evaluate", {"script": script})
        return {"result": self._extract_execution_result(result)}

    @staticmethod
    def _navigation_status(result: Any, url: str) -> dict:
        if isinstance(result, dict) and "status" in result:
            return result
        return {"status": "loaded", "url": url}

    @staticmethod
    def _extract_execution_result(result: Any) -> Any:
        """
        puppeteer_evaluate answers with text such as
        'Execution result:\\n[...]\\n\\nConsole output:\\n...'. Pull out the JSON payload.
        """
        if isinstance(result, dict) and "result" in result:
            result = result["result"]
        if isinstance(result, str):
            text = result.strip()
            if text.startswith(EXECUTION_RESULT_PREFIX):
                text = text[len(EXECUTION_RESULT_PREFIX):]
                text = text.split("\n\nConsole output:", 1)[0].strip()
            try:
                return json.loads(text)
            except (json.JSONDecodeError, TypeError):
                logger.warning(f"puppeteer_evaluate returned non-JSON output: {text[:200]}")
                return None
        return result


# ══════════════════════════════════════════════════════════════════════
#  Intelligence Store — Memory (knowledge graph) MCP server
# ══════════════════════════════════════════════════════════════════════

class MemoryMCP(MCPToolClient):
    """Knowledge-graph persistence via the Memory MCP server."""

    async def create_entities(self, entities: list[dict]) -> dict:
        result = await self.call_tool("create_entities", {"entities": entities})
        created = result if isinstance(result, list) else (result or {}).get("entities", [])
        if not isinstance(created, list):
            created = []
        # The server skips names it already knows; those still count as recorded
        return {
            "success": True,
            "stored": len(entities),
            "created": len(created),
            "entities": created,
        }

    async def search_nodes(self, query: str) -> dict:
        result = await self.call_tool("search_nodes", {"query": query})
        results = result.get("entities", []) if isinstance(result, dict) else []
        return {
            "success": True,
            "results": results,
            "query": query,
            "totalFound": len(results),
        }

    async def read_graph(self) -> dict:
        result = await self.call_tool("read_graph", {})
        graph = result if isinstance(result, dict) else {"entities": [], "relations": []}
        return {"success": True, "graph": graph}


def create_puppeteer_client(url: str, headers: Optional[dict[str, str]] = None) -> PuppeteerMCP:
    """Factory function to create a Puppeteer MCP client instance."""
    return PuppeteerMCP(url=url, headers=headers)


def create_memory_client(url: str, headers: Optional[dict[str, str]] = None) -> MemoryMCP:
    """Factory function to create a Memory MCP client instance."""
    return MemoryMCP(url=url, headers=headers)
