"""Tests for the MCP tool surface."""
import asyncio
import json

import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from deliberate_thinking.config import SERVER_NAME, TOOL_NAME
from deliberate_thinking.server import THINKING_TOOL, create_server, handle_call_tool
from deliberate_thinking.thinking_logger import ThinkingLogger
from deliberate_thinking.thought_ledger import ThoughtLedger


@pytest.fixture
def ledger():
    return ThoughtLedger()


@pytest.fixture
def logger():
    return ThinkingLogger(name="DeliberateThinkingServerTest")


def _call(ledger, logger, arguments, name=TOOL_NAME):
    return asyncio.run(handle_call_tool(ledger, name, arguments, logger))


def _snapshot(content):
    assert len(content) == 1
    assert content[0].type == "text"
    return json.loads(content[0].text)


def test_start_thought(ledger, logger):
    result = _call(ledger, logger, {
        "thought": "start", "thoughtNumber": 1, "totalThoughts": 3, "nextThoughtNeeded": True,
    })
    assert _snapshot(result) == {
        "thoughtNumber": 1,
        "totalThoughts": 3,
        "nextThoughtNeeded": True,
        "branches": [],
        "thoughtHistoryLength": 1,
    }


def test_branch_reported_after_start(ledger, logger):
    _call(ledger, logger, {
        "thought": "start", "thoughtNumber": 1, "totalThoughts": 3, "nextThoughtNeeded": True,
    })
    result = _call(ledger, logger, {
        "thought": "alt", "thoughtNumber": 2, "totalThoughts": 3, "nextThoughtNeeded": True,
        "branchFromThought": 1, "branchId": "alpha",
    })
    snapshot = _snapshot(result)
    assert snapshot["branches"] == ["alpha"]
    assert snapshot["thoughtHistoryLength"] == 2


def test_empty_thought_is_invalid_params(ledger, logger):
    _call(ledger, logger, {
        "thought": "start", "thoughtNumber": 1, "totalThoughts": 3, "nextThoughtNeeded": True,
    })
    with pytest.raises(McpError) as excinfo:
        _call(ledger, logger, {
            "thought": "", "thoughtNumber": 1, "totalThoughts": 1, "nextThoughtNeeded": True,
        })
    assert excinfo.value.error.code == types.INVALID_PARAMS
    assert excinfo.value.error.data == {"field": "thought"}
    assert ledger.history_length == 1


def test_zero_thought_number_is_invalid_params(ledger, logger):
    with pytest.raises(McpError) as excinfo:
        _call(ledger, logger, {
            "thought": "x", "thoughtNumber": 0, "totalThoughts": 1, "nextThoughtNeeded": True,
        })
    assert excinfo.value.error.data == {"field": "thoughtNumber"}
    assert "thoughtNumber" in excinfo.value.error.message
    assert ledger.history_length == 0


def test_unknown_tool(ledger, logger):
    with pytest.raises(McpError) as excinfo:
        _call(ledger, logger, {}, name="sequentialthinking")
    assert excinfo.value.error.code == types.METHOD_NOT_FOUND
    assert ledger.history_length == 0


def test_accepted_thought_is_echoed_to_stderr(ledger, capsys):
    logger = ThinkingLogger(name="DeliberateThinkingEchoTest")
    _call(ledger, logger, {
        "thought": "line one\nline two", "thoughtNumber": 4, "totalThoughts": 2,
        "nextThoughtNeeded": False, "branchId": "beta", "isRevision": True, "revisesThought": 2,
    })
    err = capsys.readouterr().err
    assert "Deliberate Thinking Step 4/4: line one | line two" in err
    assert "Branch: beta" in err
    assert "Revision of thought 2" in err
    assert capsys.readouterr().out == ""


def test_tool_schema_requires_core_fields():
    assert THINKING_TOOL.name == TOOL_NAME
    schema = THINKING_TOOL.inputSchema
    assert schema["required"] == ["thought", "nextThoughtNeeded", "thoughtNumber", "totalThoughts"]
    assert schema["properties"]["thoughtNumber"]["minimum"] == 1


def test_server_handlers_share_ledger(ledger, logger):
    server = create_server(ledger, logger)
    assert server.name == SERVER_NAME

    async def exercise():
        listed = await server.request_handlers[types.ListToolsRequest](
            types.ListToolsRequest(method="tools/list")
        )
        called = await server.request_handlers[types.CallToolRequest](
            types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(
                    name=TOOL_NAME,
                    arguments={"thought": "via server", "thoughtNumber": 1,
                               "totalThoughts": 1, "nextThoughtNeeded": False},
                ),
            )
        )
        return listed.root, called.root

    listed, called = asyncio.run(exercise())
    assert [tool.name for tool in listed.tools] == [TOOL_NAME]
    assert not called.isError
    assert json.loads(called.content[0].text)["thoughtHistoryLength"] == 1
    assert ledger.history()[0].content == "via server"


def _dispatch(server, arguments):
    async def exercise():
        result = await server.request_handlers[types.CallToolRequest](
            types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(name=TOOL_NAME, arguments=arguments),
            )
        )
        return result.root

    return asyncio.run(exercise())


@pytest.mark.parametrize("arguments,field", [
    ({"thought": "", "thoughtNumber": 1, "totalThoughts": 1, "nextThoughtNeeded": True},
     "thought"),
    ({"thought": "x", "thoughtNumber": 0, "totalThoughts": 1, "nextThoughtNeeded": True},
     "thoughtNumber"),
    ({"thought": "x", "thoughtNumber": 1, "totalThoughts": "3", "nextThoughtNeeded": True},
     "totalThoughts"),
    ({"thought": "x", "thoughtNumber": 1, "totalThoughts": 1},
     "nextThoughtNeeded"),
])
def test_server_rejection_names_field(ledger, logger, arguments, field):
    server = create_server(ledger, logger)
    _dispatch(server, {"thought": "start", "thoughtNumber": 1, "totalThoughts": 3,
                       "nextThoughtNeeded": True})

    result = _dispatch(server, arguments)

    assert result.isError
    assert f"Invalid or missing field '{field}'" in result.content[0].text
    assert ledger.history_length == 1
