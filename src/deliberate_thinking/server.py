#!/usr/bin/env python3
"""
Deliberate Thinking - MCP Server

Exposes a single tool, "deliberatethinking", over the Model Context
Protocol. Each call records one thinking step in an in-memory ledger and
returns a JSON status snapshot.

STDOUT:
- The MCP protocol uses stdout for JSON-RPC messages
- run() keeps the real stdout for the protocol and points sys.stdout at
  stderr, so a stray print() cannot corrupt the stream
- All diagnostics go to stderr through thinking_logger
"""
import asyncio
import json
import sys
import time
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData, TextContent, Tool

from . import config
from .thinking_logger import ThinkingLogger, get_logger
from .thought_ledger import ThoughtLedger
from .validators import ThoughtValidationError, validate_thought_arguments

TOOL_DESCRIPTION = """A detailed tool for dynamic and reflective problem-solving through thoughts.
This tool helps analyze problems through a flexible thinking process that can adapt and evolve.
Each thought can build on, question, or revise previous insights as understanding deepens.

When to use this tool:
- Breaking down complex problems into steps
- Planning and design with room for revision
- Analysis that might need course correction
- Problems where the full scope might not be clear initially
- Problems that require a multi-step solution
- Tasks that need to maintain context over multiple steps
- Situations where irrelevant information needs to be filtered out

Key features:
- You can adjust totalThoughts up or down as you progress
- You can question or revise previous thoughts
- You can add more thoughts even after reaching what seemed like the end
- You can express uncertainty and explore alternative approaches
- Not every thought needs to build linearly - you can branch or backtrack
- Generates a solution hypothesis
- Verifies the hypothesis based on the Chain of Thought steps
- Repeats the process until satisfied
- Provides a correct answer

Parameters explained:
- thought: Your current thinking step
- nextThoughtNeeded: True if you need more thinking, even if at what seemed like the end
- thoughtNumber: Current number in sequence (can go beyond the initial total)
- totalThoughts: Current estimate of thoughts needed (raised automatically if below thoughtNumber)
- isRevision: Whether this thought revises previous thinking
- revisesThought: If isRevision is true, which thought number is being reconsidered
- branchFromThought: If branching, which thought number is the branching point
- branchId: Identifier for the current branch (if any)
- needsMoreThoughts: If reaching the end but realizing more thoughts are needed"""

THINKING_TOOL = Tool(
    name=config.TOOL_NAME,
    description=TOOL_DESCRIPTION,
    inputSchema={
        "type": "object",
        "properties": {
            "thought": {
                "type": "string",
                "description": "Current thinking step"
            },
            "nextThoughtNeeded": {
                "type": "boolean",
                "description": "Whether another thought step is needed"
            },
            "thoughtNumber": {
                "type": "integer",
                "minimum": 1,
                "description": "Current thought number (minimum 1)"
            },
            "totalThoughts": {
                "type": "integer",
                "minimum": 1,
                "description": "Estimated total thoughts needed (minimum 1)"
            },
            "isRevision": {
                "type": "boolean",
                "description": "Whether this revises previous thinking"
            },
            "revisesThought": {
                "type": "integer",
                "minimum": 1,
                "description": "Which thought number is being reconsidered"
            },
            "branchFromThought": {
                "type": "integer",
                "minimum": 1,
                "description": "Branching point thought number"
            },
            "branchId": {
                "type": "string",
                "description": "Branch identifier"
            },
            "needsMoreThoughts": {
                "type": "boolean",
                "description": "If more thoughts are needed"
            }
        },
        "required": ["thought", "nextThoughtNeeded", "thoughtNumber", "totalThoughts"]
    }
)


def safe_json_dumps(obj: dict, indent: Optional[int] = None) -> str:
    """
    Safe JSON serialization that ensures clean output.
    Uses ensure_ascii=True to escape all non-ASCII characters.
    """
    return json.dumps(obj, indent=indent, ensure_ascii=True)


async def handle_call_tool(ledger: ThoughtLedger, name: str, arguments: Optional[Dict[str, Any]],
                           logger: Optional[ThinkingLogger] = None) -> List[TextContent]:
    """
    Dispatch one tool call to the ledger.

    Raises:
        McpError: METHOD_NOT_FOUND for an unknown tool, INVALID_PARAMS
                  (with data={"field": ...}) when validation fails.
                  The low-level server turns it into a CallToolResult with
                  isError=True whose only text is the error message, so the
                  message itself must name the field.
    """
    logger = logger or get_logger()
    start_time = time.time()

    if name != config.TOOL_NAME:
        logger.mcp_tool_call(name, arguments or {}, False, 0.0, error="unknown tool")
        raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))

    try:
        record = validate_thought_arguments(arguments)
    except ThoughtValidationError as e:
        duration_ms = (time.time() - start_time) * 1000
        logger.mcp_tool_call(name, arguments or {}, False, duration_ms, error=str(e))
        raise McpError(ErrorData(code=INVALID_PARAMS, message=str(e), data={"field": e.field})) from e

    try:
        snapshot = ledger.submit(record)
        payload = safe_json_dumps(snapshot.to_dict())
    except Exception as e:
        logger.error(f"Tool {name} failed after validation", exception=e)
        raise

    if config.ECHO_THOUGHTS:
        logger.thought_step(record.with_corrected_total())

    duration_ms = (time.time() - start_time) * 1000
    logger.mcp_tool_call(name, arguments or {}, True, duration_ms)

    return [TextContent(type="text", text=payload)]


def create_server(ledger: ThoughtLedger, logger: Optional[ThinkingLogger] = None) -> Server:
    """Build an MCP server whose handlers all share the given ledger."""
    server = Server(config.SERVER_NAME, version=config.SERVER_VERSION)

    @server.list_tools()
    async def list_tools():
        """List all available tools"""
        return [THINKING_TOOL]

    # validate_thought_arguments reports the offending field by name; jsonschema does not
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict):
        return await handle_call_tool(ledger, name, arguments, logger)

    return server


async def main(protocol_stdout=None):
    """Run the MCP server over stdio until the client disconnects."""
    logger = get_logger()
    config.ensure_directories()

    sys.stderr.write(f"Deliberate Thinking MCP: starting {config.SERVER_NAME} {config.SERVER_VERSION}\n")
    sys.stderr.flush()
    logger.debug("Server configuration", **config.get_server_info())

    ledger = ThoughtLedger()
    server = create_server(ledger, logger)

    # JSON-RPC goes to the real stdout saved by run(), not the redirected one.
    from io import TextIOWrapper

    import anyio

    protocol_stdout = protocol_stdout or sys.__stdout__
    _mcp_stdout = anyio.wrap_file(
        TextIOWrapper(protocol_stdout.buffer, encoding="utf-8")
    )

    async with stdio_server(stdout=_mcp_stdout) as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())

    logger.info("Transport closed", thoughts=ledger.history_length,
                branches=len(ledger.branch_names()), **logger.get_log_stats())


def run():
    """Console entry point: keep stdout for JSON-RPC, send print() to stderr."""
    original_stdout = sys.stdout
    sys.stdout = sys.stderr
    try:
        asyncio.run(main(original_stdout))
    except KeyboardInterrupt:
        pass
    finally:
        sys.stdout = original_stdout


if __name__ == "__main__":
    run()
