"""Shared fakes for the tool-server side of the bridge."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest

from core.models import ToolDescriptor


class FakeRemote:
    """Stands in for the remote-call and discovery services."""

    def __init__(self, responses: Dict[str, Any] | None = None, tools: List[ToolDescriptor] | None = None) -> None:
        self.responses = responses or {}
        self.tools = tools or []
        self.calls: List[tuple[str, Dict[str, Any]]] = []

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> Any:
        self.calls.append((name, arguments))
        response = self.responses.get(name)
        if isinstance(response, Exception):
            raise response
        return response

    async def list_tools(self) -> List[ToolDescriptor]:
        return list(self.tools)


def object_schema(count: int, prefix: str = "p") -> Dict[str, Any]:
    """An object schema with ``count`` string properties."""
    return {
        "type": "object",
        "properties": {f"{prefix}{i}": {"type": "string"} for i in range(count)},
    }


@pytest.fixture
def fake_remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def issue_tool() -> ToolDescriptor:
    return ToolDescriptor(
        name="gh-list-issues",
        description="List issues of a repository",
        raw_schema={
            "type": "object",
            "properties": {
                "owner": {"type": "string", "description": "Repository owner"},
                "repo": {"type": "string"},
                "state": {"type": "string", "enum": ["open", "closed", "all"]},
                "per_page": {"type": "integer", "minimum": 1, "maximum": 100},
            },
            "required": ["owner", "repo"],
            "additionalProperties": False,
        },
    )
