"""Tests for Notion error-body rendering."""

from __future__ import annotations

import pytest

from notionpress.publish.error_messages import parse_notion_error


class TestParseNotionError:
    @pytest.mark.parametrize(
        "code, expected",
        [
            ("validation_error", "Validation Error: m"),
            ("invalid_request_url", "Invalid Request URL: m"),
            ("invalid_request", "Invalid Request: m"),
            ("unauthorized", "Unauthorized: m. Please check your Notion API key."),
            (
                "restricted_resource",
                "Restricted Resource: m. The integration may not have access to this page.",
            ),
            (
                "object_not_found",
                "Object Not Found: m. The page may not exist or the integration "
                "doesn't have access.",
            ),
            ("rate_limited", "Rate Limited: m. Please try again later."),
            ("internal_server_error", "Internal Server Error: m. This is a Notion API issue."),
            (
                "service_unavailable",
                "Service Unavailable: m. Notion API is temporarily unavailable.",
            ),
        ],
    )
    def test_known_codes(self, code, expected):
        assert parse_notion_error({"code": code, "message": "m"}) == expected

    def test_unknown_code_passes_through(self):
        assert parse_notion_error({"code": "conflict_error", "message": "m"}) == "conflict_error: m"

    def test_missing_fields_use_defaults(self):
        assert parse_notion_error({}) == "unknown_error: No error message provided"

    @pytest.mark.parametrize("body", [None, "oops", 42, ["x"]])
    def test_non_dict(self, body):
        assert parse_notion_error(body) == "Unknown error format"
