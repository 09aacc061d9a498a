"""MCP server implementation."""
import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server import stdio
from mcp.server.lowlevel import Server
from mcp.server.models import InitializationOptions

from tailwind_runtime import __version__
from tailwind_runtime.config import TailwindConfig
from tailwind_runtime.errors import TailwindError, log_error
from tailwind_runtime.logging import configure_logging, get_logger
from tailwind_runtime.tailwind import Tailwind
from tailwind_runtime.types import InitializeOption, RunOption, TailwindVersion

logger = get_logger("server")

tools = [
    types.Tool(
        name="tailwind_initialize",
        description="Create a starter tailwind.css stylesheet in a directory",
        inputSchema={
            "type": "object",
            "properties": {
                "directory": {"type": "string", "description": "Directory to write tailwind.css into"},
                "full": {"type": "boolean", "description": "Include theme and layer examples"},
            },
            "required": ["directory"],
        },
    ),
    types.Tool(
        name="tailwind_run",
        description="Compile a Tailwind stylesheet with the standalone CLI",
        inputSchema={
            "type": "object",
            "properties": {
                "input": {"type": "string", "description": "Input CSS file"},
                "output": {"type": "string", "description": "Output CSS file"},
                "directory": {"type": "string", "description": "Working directory for the build"},
                "version": {"type": "string", "description": "Tailwind version, defaults to latest"},
                "minify": {"type": "boolean"},
                "autoprefixer": {"type": "boolean"},
                "content": {"type": "string", "description": "Content glob to scan for classes"},
                "config": {"type": "string", "description": "Path to a Tailwind config file"},
            },
            "required": ["input", "output", "directory"],
        },
    ),
    types.Tool(
        name="tailwind_download",
        description="Download and verify the Tailwind standalone executable",
        inputSchema={
            "type": "object",
            "properties": {
                "version": {"type": "string", "description": "Tailwind version, defaults to latest"},
            },
        },
    ),
]


def _text(payload: Dict[str, Any]) -> List[types.TextContent]:
    return [types.TextContent(type="text", text=json.dumps(payload))]


def run_options_from_arguments(arguments: Dict[str, Any]) -> List[RunOption]:
    options = []
    if arguments.get("minify"):
        options.append(RunOption.minify())
    if arguments.get("autoprefixer"):
        options.append(RunOption.autoprefixer())
    if arguments.get("content"):
        options.append(RunOption.content(arguments["content"]))
    if arguments.get("config"):
        options.append(RunOption.config(arguments["config"]))
    return options


async def handle_tool_call(
    name: str, arguments: Dict[str, Any], config: TailwindConfig
) -> List[types.TextContent]:
    """Dispatch a tool call and wrap the outcome as JSON text."""
    try:
        tailwind = Tailwind(TailwindVersion(arguments.get("version") or "latest"), config=config)

        if name == "tailwind_initialize":
            options = [InitializeOption.FULL] if arguments.get("full") else []
            css_path = await tailwind.initialize(arguments["directory"], *options)
            return _text({"success": True, "data": {"path": str(css_path)}})

        elif name == "tailwind_run":
            # stdout carries the MCP stream, so the child's output is captured
            directory = Path(arguments["directory"])
            lines = [
                line
                async for line in tailwind.stream(
                    directory / arguments["input"],
                    directory / arguments["output"],
                    directory,
                    *run_options_from_arguments(arguments),
                )
            ]
            return _text({
                "success": True,
                "data": {"output": str(directory / arguments["output"]), "log": lines},
            })

        elif name == "tailwind_download":
            executable = await tailwind.download()
            return _text({"success": True, "data": {"executable": str(executable)}})

        return _text({"success": False, "error": f"Unknown tool: {name}"})

    except TailwindError as e:
        log_error(e, {"tool": name}, logger)
        return _text({"success": False, "error": str(e), "code": e.code, "details": e.details})
    except (KeyError, ValueError) as e:
        log_error(e, {"tool": name}, logger)
        return _text({"success": False, "error": f"Invalid arguments: {e}"})


def init_server(config: Optional[TailwindConfig] = None) -> Server:
    config = config or TailwindConfig.from_env()
    logger.info("tools_registered", tools=[t.name for t in tools])

    server = Server("tailwind-runtime")

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return tools

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
        logger.debug("tool_call_received", tool=name, arguments=arguments)
        return await handle_tool_call(name, arguments or {}, config)

    return server


async def serve() -> None:
    config = TailwindConfig.from_env()
    configure_logging(config.log_level)
    logger.info("server_starting", cache_dir=str(config.cache_dir))
    server = init_server(config)
    async with stdio.stdio_server() as (read_stream, write_stream):
        init_options = InitializationOptions(
            server_name="tailwind-runtime",
            server_version=__version__,
            capabilities=types.ServerCapabilities(
                tools=types.ToolsCapability(listChanged=False),
                logging=types.LoggingCapability(),
            ),
        )
        await server.run(read_stream, write_stream, init_options)


def main() -> None:
    """Run the MCP server."""
    asyncio.run(serve())
