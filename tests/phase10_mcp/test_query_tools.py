"""Tests for the query tool implementations.

Exercises the _impl functions against the in-memory sample corpus and
checks the success and failure response shapes produced by
_with_error_handling.
"""

import pytest

from codequery.mcp_server import create_server, mcp
from codequery.mcp_server.tools import (
    _list_filter_categories_impl,
    _query_classes_impl,
    _query_models_impl,
    _query_routes_impl,
    _query_views_impl,
)

from .conftest import _as_dict

QUERY_TOOLS = {"query_classes", "query_models", "query_routes", "query_views"}


class TestToolRegistration:
    """All tools are registered on the shared FastMCP instance."""

    def test_tools_registered(self):
        tool_names = set(mcp._tool_manager._tools.keys())
        assert QUERY_TOOLS | {"list_filter_categories", "manage_corpus"} <= tool_names

    def test_server_identity(self, reset_server_state):
        server = create_server()
        assert server is mcp
        assert server.name == "codequery"
        assert "list_filter_categories" in server.instructions


@pytest.mark.usefixtures("active_sample_corpus")
class TestQueryImpl:
    """Successful queries."""

    def test_classes_keyed_by_name(self):
        result = _as_dict(_query_classes_impl({"implements_interfaces_or": ["*Billable"]}))
        assert result["success"] is True
        assert result["message"] == "Found 1 classes."
        assert list(result["classes"]) == ["App\\Services\\BillingService"]

    def test_no_filters_returns_everything(self):
        result = _as_dict(_query_models_impl())
        assert result["message"] == "Found 3 models."
        assert set(result["models"]) == {
            "App\\Models\\User",
            "App\\Models\\Post",
            "App\\Models\\Comment",
        }

    def test_unset_filters_are_ignored(self):
        filters = {
            "has_relations_and": None,
            "has_properties_or": [],
            "has_hidden_properties_or": ["password"],
        }
        result = _as_dict(_query_models_impl(filters))
        assert list(result["models"]) == ["App\\Models\\User"]

    def test_empty_result(self):
        result = _as_dict(_query_routes_impl({"uses_middleware_or": ["throttle:api"]}))
        assert result == {"success": True, "message": "No routes found.", "routes": []}

    def test_routes_are_ordered(self):
        result = _as_dict(_query_routes_impl({"uses_controller_or": ["*PostController"]}))
        assert [r["name"] for r in result["routes"]] == ["posts.index", "posts.show", "posts.store"]

    def test_views_include_usage(self):
        result = _as_dict(_query_views_impl({"used_by_or": ["pages.admin.dashboard"]}))
        views = {v["name"]: v for v in result["views"]}
        assert list(views) == ["layouts.app", "partials.stats"]
        assert views["layouts.app"]["uses"] == ["partials.nav"]
        assert views["partials.stats"]["used_by"] == ["pages.admin.dashboard"]

    def test_registered_wrapper_forwards_arguments(self):
        tool = mcp._tool_manager._tools["query_routes"]
        result = _as_dict(tool.fn(uses_middleware_and=["web", "auth"]))
        assert [r["uri"] for r in result["routes"]] == ["posts", "admin/users/{user}"]


@pytest.mark.usefixtures("active_sample_corpus")
class TestQueryFailures:
    """Errors become failure responses."""

    def test_unknown_filter(self):
        result = _query_classes_impl({"has_relations_or": ["posts"]})
        assert result["success"] is False
        assert result["error_code"] == "client_error"
        assert result["is_retryable"] is False
        assert result["error_type"] == "UnknownFilterError"
        assert "has_relations_or" in result["error"]
        assert result["recovery_actions"]


class TestCorpusFailures:
    """Corpus problems surface through every query tool."""

    def test_missing_corpus_is_retryable(self, reset_server_state, tmp_path):
        reset_server_state._registry.activate(str(tmp_path / "missing.json"))
        result = _query_views_impl({})
        assert result["success"] is False
        assert result["error_code"] == "transient"
        assert result["is_retryable"] is True
        assert result["error_type"] == "CorpusError"
        assert "missing.json" in result["error"]

    def test_malformed_corpus_is_permanent(self, reset_server_state, tmp_path):
        path = tmp_path / "corpus.json"
        path.write_text('{"classes": [{"name": ""}]}', encoding="utf-8")
        reset_server_state._registry.activate(str(path))
        result = _query_classes_impl({})
        assert result["success"] is False
        assert result["error_code"] == "permanent"
        assert "classes[0]" in result["error"]


class TestListFilterCategories:
    """Tests for _list_filter_categories_impl."""

    def test_all_kinds(self):
        result = _as_dict(_list_filter_categories_impl())
        assert result["success"] is True
        assert result["message"] == "Found 80 filter categories."
        assert {f["kind"] for f in result["filters"]} == {"class", "model", "route", "view"}

    def test_one_kind(self):
        result = _as_dict(_list_filter_categories_impl("View"))
        names = [f["name"] for f in result["filters"]]
        assert len(names) == 12
        assert "not_used_by_and" in names

    def test_tabular_response_is_toon_encoded(self, reset_server_state):
        result = _list_filter_categories_impl("route")
        if reset_server_state._settings.toon_enabled:
            assert isinstance(result, str)
        assert len(_as_dict(result)["filters"]) == 20

    def test_unknown_kind(self):
        result = _list_filter_categories_impl("controller")
        assert result["success"] is False
        assert result["error_code"] == "client_error"
        assert "controller" in result["error"]
