"""Shared test fixtures for the notionpress test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from notionpress.config import ConversionOptions, NotionpressConfig
from notionpress.converter.md_to_notion import MarkdownToNotionConverter

PAGE_ID = "59833787-2cf9-4fdf-8782-e53db20768a5"


@pytest.fixture
def config() -> NotionpressConfig:
    """Default test configuration with a dummy token."""
    return NotionpressConfig(token="test_token_1234")


@pytest.fixture
def converter(config: NotionpressConfig) -> MarkdownToNotionConverter:
    """Markdown-to-Notion converter using the default test config."""
    return MarkdownToNotionConverter(config)


@pytest.fixture
def options() -> ConversionOptions:
    return ConversionOptions()


def ok_response(children: list[dict], prefix: str = "blk") -> dict:
    """A successful append response listing one id per child."""
    return {
        "object": "list",
        "results": [
            {"object": "block", "id": f"{prefix}-{i}", "type": child.get("type")}
            for i, child in enumerate(children)
        ],
    }


def error_body(code: str = "validation_error", message: str = "bad block") -> dict:
    return {"object": "error", "status": 400, "code": code, "message": message}


class FakeBlockAPI:
    """In-memory append endpoint.

    Every created block gets a sequential id ``b1``, ``b2`` ...; *reject*
    decides whether a payload fails with a structured in-band error.
    Calls are recorded as ``(parent_id, children)``.
    """

    def __init__(self, reject=None) -> None:
        self.calls: list[tuple[str, list[dict]]] = []
        self._reject = reject or (lambda children: False)
        self._next_id = 0

    def respond(self, parent_id: str, children: list[dict]) -> dict:
        self.calls.append((parent_id, children))
        if self._reject(children):
            return error_body()
        results = []
        for child in children:
            self._next_id += 1
            results.append({"object": "block", "id": f"b{self._next_id}", "type": child["type"]})
        return {"object": "list", "results": results}


@pytest.fixture
def fake_api() -> FakeBlockAPI:
    return FakeBlockAPI()


def sync_api(fake: FakeBlockAPI) -> MagicMock:
    api = MagicMock()
    api.append_children.side_effect = fake.respond
    return api


def async_api(fake: FakeBlockAPI) -> MagicMock:
    api = MagicMock()
    api.append_children = AsyncMock(side_effect=fake.respond)
    return api
