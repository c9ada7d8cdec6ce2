"""Shared test fixtures for the notiondb test suite."""

from __future__ import annotations

import pytest

from notiondb.config import NotionConfig, RetryConfig


@pytest.fixture
def config() -> NotionConfig:
    """Default test configuration with a dummy token."""
    return NotionConfig(
        token="test-token-1234",
        retry=RetryConfig(max_retries=3, base_delay_ms=1000, max_delay_ms=5000),
    )


@pytest.fixture
def database_payload() -> dict:
    """A minimal database object as returned by the Notion API."""
    return {
        "object": "database",
        "id": "db-1",
        "title": [{"type": "text", "plain_text": "Tasks", "href": None}],
        "properties": {"Name": {"id": "title", "type": "title", "title": {}}},
        "url": "https://www.notion.so/db-1",
        "created_time": "2024-01-01T00:00:00.000Z",
        "last_edited_time": "2024-01-02T00:00:00.000Z",
    }


@pytest.fixture
def page_payload() -> dict:
    """A minimal page (database row) object as returned by the Notion API."""
    return {
        "object": "page",
        "id": "pg-1",
        "created_time": "2024-01-01T00:00:00.000Z",
        "last_edited_time": "2024-01-02T00:00:00.000Z",
        "archived": False,
        "properties": {"Name": {"id": "title", "type": "title", "title": []}},
        "url": "https://www.notion.so/pg-1",
    }
