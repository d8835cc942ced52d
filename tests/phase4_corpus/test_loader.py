"""
Phase 4 Tests: Corpus Loader

Tests for corpus_from_dict / load_corpus:
- Entity construction from snapshot records
- Strict record validation with located errors
- File errors mapped to corpus error codes
- Duplicate handling per section
"""

import json

import pytest

from codequery.corpus import Corpus, corpus_from_dict, load_corpus
from codequery.types import (
    ControllerRef,
    CorpusError,
    EntityKind,
    ErrorCode,
    ModelEntity,
    Relation,
)
from codequery.utils.logger import logger


class TestCorpusFromDict:
    """Building entities from decoded snapshot data."""

    def test_counts(self, sample_corpus):
        assert sample_corpus.counts() == {"classes": 3, "models": 3, "routes": 6, "views": 8}
        assert not sample_corpus.is_empty

    def test_entities_by_kind(self, sample_corpus):
        assert sample_corpus.entities(EntityKind.MODEL) is sample_corpus.models
        assert sample_corpus.entities("view") is sample_corpus.views

    def test_model_fields(self, sample_corpus):
        user = sample_corpus.models[0]
        assert isinstance(user, ModelEntity)
        assert user.fillable == ("name", "email", "password")
        assert user.hidden == ("password",)
        assert user.relations == (Relation("posts", "App\\Models\\Post", "HasMany"),)

    def test_closure_route(self, sample_corpus):
        home = sample_corpus.routes[0]
        assert home.controller == ControllerRef()
        assert home.controller.is_closure

    def test_closure_marker(self):
        corpus = corpus_from_dict(
            {"routes": [{"uri": "/", "methods": ["get"], "controller": "Closure"}]}
        )
        route = corpus.routes[0]
        assert route.controller.is_closure
        assert route.methods == ("GET",)
        assert route.name is None

    def test_missing_sections_are_empty(self):
        corpus = corpus_from_dict({})
        assert corpus == Corpus()
        assert corpus.is_empty

    def test_null_section(self):
        assert corpus_from_dict({"views": None}).views == ()

    def test_source_is_recorded(self):
        assert corpus_from_dict({}, source="snap.json").source == "snap.json"

    def test_unknown_sections_warn(self):
        messages = []
        sink = logger.add(messages.append, level="WARNING", format="{message}")
        try:
            corpus_from_dict({"classes": [], "jobs": [], "events": []})
        finally:
            logger.remove(sink)
        assert any("events, jobs" in str(m) for m in messages)


class TestValidation:
    """Malformed records raise CorpusError with their position."""

    def _error(self, data) -> CorpusError:
        with pytest.raises(CorpusError) as exc_info:
            corpus_from_dict(data, source="snap.json")
        return exc_info.value

    def test_not_an_object(self):
        error = self._error([])
        assert error.code == ErrorCode.CORPUS_MALFORMED
        assert error.context.file_path == "snap.json"

    def test_section_not_a_list(self):
        assert "'classes' must be a list" in str(self._error({"classes": {}}))

    def test_record_not_an_object(self):
        assert "views[0]" in str(self._error({"views": ["pages.home"]}))

    def test_missing_name(self):
        error = self._error({"classes": [{"name": "A"}, {"interfaces": []}]})
        assert str(error).startswith("classes[1]:")
        assert "'name'" in str(error)

    def test_bad_string_list(self):
        assert "'traits'" in str(self._error({"classes": [{"name": "A", "traits": "T"}]}))

    def test_relation_strings_rejected(self):
        error = self._error({"models": [{"name": "M", "relations": ["posts"]}]})
        assert "relation 'posts'" in str(error)

    def test_relation_needs_related(self):
        assert "related" in str(self._error({"models": [{"name": "M", "relations": [{"name": "x"}]}]}))

    def test_route_needs_methods(self):
        error = self._error({"routes": [{"uri": "/", "methods": []}]})
        assert "'methods'" in str(error)

    def test_closure_with_action(self):
        error = self._error({"routes": [{"uri": "/", "methods": ["GET"], "action": "index"}]})
        assert "closure" in str(error)

    def test_duplicate_class(self):
        error = self._error({"classes": [{"name": "A"}, {"name": "A"}]})
        assert "duplicate name 'A'" in str(error)

    def test_duplicate_view(self):
        assert "views[1]" in str(self._error({"views": [{"name": "a"}, {"name": "a"}]}))

    def test_routes_may_repeat(self):
        route = {"uri": "/", "methods": ["GET"]}
        assert len(corpus_from_dict({"routes": [route, dict(route)]}).routes) == 2

    def test_same_name_across_sections(self):
        corpus = corpus_from_dict({"classes": [{"name": "A"}], "models": [{"name": "A"}]})
        assert corpus.counts()["models"] == 1


class TestLoadCorpus:
    """Reading snapshot files."""

    def test_load(self, corpus_file):
        corpus = load_corpus(corpus_file)
        assert corpus.counts()["routes"] == 6
        assert corpus.source == str(corpus_file)

    def test_accepts_str_path(self, corpus_file):
        assert load_corpus(str(corpus_file)).counts()["views"] == 8

    def test_missing_file(self, tmp_path):
        with pytest.raises(CorpusError) as exc_info:
            load_corpus(tmp_path / "nope.json")
        assert exc_info.value.code == ErrorCode.CORPUS_NOT_FOUND
        assert isinstance(exc_info.value.original_error, FileNotFoundError)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CorpusError) as exc_info:
            load_corpus(path)
        assert exc_info.value.code == ErrorCode.CORPUS_MALFORMED
        assert "not valid JSON" in str(exc_info.value)

    def test_directory_is_unreadable(self, tmp_path):
        with pytest.raises(CorpusError) as exc_info:
            load_corpus(tmp_path)
        assert exc_info.value.code in (ErrorCode.CORPUS_READ_FAILED, ErrorCode.CORPUS_NOT_FOUND)

    def test_malformed_record_in_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"routes": [{"uri": "/"}]}), encoding="utf-8")
        with pytest.raises(CorpusError) as exc_info:
            load_corpus(path)
        assert exc_info.value.context.file_path == str(path)
