"""
proxy.py — MCP proxy that runs upstream tool responses through brevit.

Sits between an agent and an upstream MCP server and rewrites each text
item of a tool result with ``BrevitClient.optimize``: JSON becomes flattened
brevit text, long prose goes to the text optimizer, short text passes through.

Configuration (environment variables):
    UPSTREAM_MCP_URL    — URL of the upstream MCP server (required)
    BREVIT_TOOLS        — comma-separated tool names, or * for all (default: *)
    MIN_TOKEN_THRESHOLD — skip optimizing if the original response is below
                           this token count (default: 0 = off)
    REVERT_IF_LARGER    — keep the original response if the optimized output
                           has at least as many tokens (default: false)
    PROXY_HOST          — bind host (default: 0.0.0.0)
    PROXY_PORT          — bind port (default: 9000)
    BREVIT_*            — client options, see brevit.config

Usage:
    UPSTREAM_MCP_URL=http://localhost:8080/mcp brevit-proxy
"""

import logging
import os
import sys
from dataclasses import dataclass, field

from fastmcp import FastMCP
from fastmcp.server.middleware import Middleware
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent

from brevit.client import BrevitClient
from brevit.config import BrevitConfig, parse_bool
from brevit.metrics import create_recorder
from brevit.tokens import count_tokens

logger = logging.getLogger("brevit")


@dataclass
class ProxyConfig:
    """Proxy configuration: upstream, tool selection and the client config."""

    url: str
    tools: list[str] | None = None  # None means all ("*")
    min_token_threshold: int = 0
    revert_if_larger: bool = False
    host: str = "0.0.0.0"
    port: int = 9000
    brevit: BrevitConfig = field(default_factory=BrevitConfig)

    @classmethod
    def from_env(cls) -> "ProxyConfig":
        url = os.environ.get("UPSTREAM_MCP_URL")
        if not url:
            print("error: UPSTREAM_MCP_URL environment variable is required", file=sys.stderr)
            sys.exit(1)

        tools_env = os.environ.get("BREVIT_TOOLS", "*").strip()
        if tools_env == "*":
            tools = None
        else:
            tools = [t.strip() for t in tools_env.split(",") if t.strip()]

        return cls(
            url=url,
            tools=tools,
            min_token_threshold=int(os.environ.get("MIN_TOKEN_THRESHOLD", "0")),
            revert_if_larger=parse_bool(os.environ.get("REVERT_IF_LARGER", "false")),
            host=os.environ.get("PROXY_HOST", "0.0.0.0"),
            port=int(os.environ.get("PROXY_PORT", "9000")),
            brevit=BrevitConfig.load(),
        )


class BrevitMiddleware(Middleware):
    """Intercepts tool call responses and optimizes their text content."""

    def __init__(
        self,
        client: BrevitClient,
        tools: list[str] | None = None,
        min_token_threshold: int = 0,
        revert_if_larger: bool = False,
    ):
        """
        Args:
            client: Client used to optimize each text item.
            tools: Tool names to process, or None for all.
            min_token_threshold: Skip items below this token count (0 = off).
            revert_if_larger: Keep the original when optimizing does not shrink it.
        """
        super().__init__()
        self.client = client
        self.tools = tools
        self.min_token_threshold = min_token_threshold
        self.revert_if_larger = revert_if_larger

    def _should_process(self, tool_name: str) -> bool:
        return self.tools is None or tool_name in self.tools

    async def _optimize_item(self, text: str, tool_name: str) -> str | None:
        """Return the optimized text, or None when the item should stay as-is."""
        orig_tokens = None
        if self.min_token_threshold > 0:
            orig_tokens = count_tokens(text)
            if orig_tokens < self.min_token_threshold:
                logger.info(
                    "tool=%s action=skipped tokens=%d threshold=%d",
                    tool_name, orig_tokens, self.min_token_threshold,
                )
                return None

        optimized = await self.client.optimize(text)
        if optimized == text:
            return None

        if self.revert_if_larger:
            if orig_tokens is None:
                orig_tokens = count_tokens(text)
            new_tokens = count_tokens(optimized)
            if new_tokens >= orig_tokens:
                logger.info(
                    "tool=%s action=reverted optimized_tokens=%d original_tokens=%d",
                    tool_name, new_tokens, orig_tokens,
                )
                return None

        logger.info(
            "tool=%s action=optimized input_chars=%d output_chars=%d",
            tool_name, len(text), len(optimized),
        )
        return optimized

    async def on_call_tool(self, context, call_next) -> ToolResult:
        tool_name = context.message.name
        result = await call_next(context)
        if not self._should_process(tool_name):
            return result

        changed = False
        for item in result.content:
            if not isinstance(item, TextContent):
                continue
            optimized = await self._optimize_item(item.text, tool_name)
            if optimized is not None:
                item.text = optimized
                changed = True

        # Clear structuredContent so the client uses our optimized text
        if changed:
            result.structured_content = None
        return result

    async def on_list_tools(self, context, call_next):
        tools = await call_next(context)
        for tool in tools:
            if self._should_process(tool.name):
                tool.output_schema = None
        return tools


def main():
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=logging.INFO,
        stream=sys.stderr,
    )
    from fastmcp.client.client import Client

    config = ProxyConfig.from_env()
    metrics = create_recorder(
        enabled=config.brevit.metrics_enabled, port=config.brevit.metrics_port,
    )
    client = BrevitClient(config.brevit, metrics=metrics)

    proxy = FastMCP.as_proxy(Client(config.url))
    proxy.add_middleware(BrevitMiddleware(
        client=client,
        tools=config.tools,
        min_token_threshold=config.min_token_threshold,
        revert_if_larger=config.revert_if_larger,
    ))

    logger.info(
        "starting host=%s port=%d upstream=%s tools=%s json_mode=%s "
        "abbreviations=%s min_token_threshold=%s revert_if_larger=%s metrics=%s",
        config.host, config.port, config.url,
        "*" if config.tools is None else ",".join(config.tools),
        config.brevit.json_mode.value, config.brevit.enable_abbreviations,
        config.min_token_threshold or "off", config.revert_if_larger,
        f"http://0.0.0.0:{config.brevit.metrics_port}/metrics" if config.brevit.metrics_enabled else "off",
    )

    proxy.run(transport="streamable-http", host=config.host, port=config.port)


if __name__ == "__main__":
    main()
