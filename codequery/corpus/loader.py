"""Load a corpus snapshot written by an extractor.

The snapshot is a JSON object with optional ``classes``, ``models``,
``routes`` and ``views`` arrays. Records are validated strictly: anything
malformed raises :class:`CorpusError` with the offending record's position,
because the query engine has no recovery path for bad records.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, NoReturn

from codequery.constants import CLOSURE_MARKER
from codequery.corpus.corpus import Corpus
from codequery.types.entities import (
    ClassEntity,
    ControllerRef,
    ModelEntity,
    Relation,
    RouteEntity,
    ViewEntity,
)
from codequery.types.errors import CorpusError, ErrorCode
from codequery.utils.logger import logger

_SECTIONS = ("classes", "models", "routes", "views")


class _RecordReader:
    """Typed field access on one raw record, with located error messages."""

    def __init__(self, section: str, index: int, record: Any, source: str | None) -> None:
        self.where = f"{section}[{index}]"
        self.source = source
        if not isinstance(record, dict):
            self.fail(f"expected an object, got {type(record).__name__}")
        self.record: dict[str, Any] = record

    def fail(self, problem: str) -> NoReturn:
        raise CorpusError(f"{self.where}: {problem}", file_path=self.source)

    def string(self, key: str) -> str:
        value = self.record.get(key)
        if not isinstance(value, str) or not value:
            self.fail(f"'{key}' must be a non-empty string")
        return value

    def optional_string(self, key: str) -> str | None:
        value = self.record.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            self.fail(f"'{key}' must be a string or null")
        return value or None

    def strings(self, key: str) -> tuple[str, ...]:
        value = self.record.get(key, [])
        if value is None:
            return ()
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            self.fail(f"'{key}' must be a list of strings")
        return tuple(value)


def _class_fields(reader: _RecordReader) -> dict[str, Any]:
    return {
        "name": reader.string("name"),
        "interfaces": reader.strings("interfaces"),
        "traits": reader.strings("traits"),
        "parents": reader.strings("parents"),
        "file": reader.optional_string("file"),
    }


def parse_class(reader: _RecordReader) -> ClassEntity:
    return ClassEntity(**_class_fields(reader))


def _parse_relation(reader: _RecordReader, raw: Any) -> Relation:
    if isinstance(raw, str):
        reader.fail(f"relation '{raw}' must be an object with 'name' and 'related'")
    if not isinstance(raw, dict):
        reader.fail("'relations' entries must be objects")
    name, related = raw.get("name"), raw.get("related")
    if not isinstance(name, str) or not name or not isinstance(related, str) or not related:
        reader.fail("relations need non-empty 'name' and 'related' strings")
    rel_type = raw.get("type")
    if rel_type is not None and not isinstance(rel_type, str):
        reader.fail("relation 'type' must be a string or null")
    return Relation(name=name, related=related, type=rel_type)


def parse_model(reader: _RecordReader) -> ModelEntity:
    raw_relations = reader.record.get("relations", []) or []
    if not isinstance(raw_relations, list):
        reader.fail("'relations' must be a list")
    return ModelEntity(
        **_class_fields(reader),
        properties=reader.strings("properties"),
        fillable=reader.strings("fillable"),
        hidden=reader.strings("hidden"),
        relations=tuple(_parse_relation(reader, raw) for raw in raw_relations),
    )


def parse_route(reader: _RecordReader) -> RouteEntity:
    methods = reader.strings("methods")
    if not methods:
        reader.fail("'methods' must list at least one HTTP method")
    controller = reader.optional_string("controller")
    if controller == CLOSURE_MARKER:
        controller = None
    action = reader.optional_string("action")
    if controller is None and action is not None:
        reader.fail("closure routes cannot name an 'action' method")
    return RouteEntity(
        uri=reader.string("uri"),
        methods=tuple(m.upper() for m in methods),
        controller=ControllerRef(controller, action),
        name=reader.optional_string("name"),
        middleware=reader.strings("middleware"),
        parameters=reader.strings("parameters"),
    )


def parse_view(reader: _RecordReader) -> ViewEntity:
    return ViewEntity(
        name=reader.string("name"),
        references=reader.strings("references"),
        file=reader.optional_string("file"),
    )


_PARSERS: dict[str, Callable[[_RecordReader], Any]] = {
    "classes": parse_class,
    "models": parse_model,
    "routes": parse_route,
    "views": parse_view,
}


def _parse_section(data: dict[str, Any], section: str, source: str | None) -> tuple:
    raw = data.get(section, [])
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise CorpusError(f"'{section}' must be a list", file_path=source)

    parser = _PARSERS[section]
    entities = []
    seen: set = set()
    for index, record in enumerate(raw):
        entity = parser(_RecordReader(section, index, record, source))
        # Routes may legitimately repeat method+URI across domains
        if section != "routes":
            if entity.identity in seen:
                raise CorpusError(
                    f"{section}[{index}]: duplicate name '{entity.identity}'",
                    file_path=source,
                )
            seen.add(entity.identity)
        entities.append(entity)
    return tuple(entities)


def corpus_from_dict(data: Any, source: str | None = None) -> Corpus:
    """Build a validated :class:`Corpus` from decoded snapshot data.

    Raises:
        CorpusError: If the data or any record is malformed.
    """
    if not isinstance(data, dict):
        raise CorpusError("corpus snapshot must be a JSON object", file_path=source)

    unknown = sorted(set(data) - set(_SECTIONS))
    if unknown:
        logger.warning(f"Ignoring unknown corpus sections: {', '.join(unknown)}")

    return Corpus(
        classes=_parse_section(data, "classes", source),
        models=_parse_section(data, "models", source),
        routes=_parse_section(data, "routes", source),
        views=_parse_section(data, "views", source),
        source=source,
    )


def load_corpus(path: str | Path) -> Corpus:
    """Read and validate a corpus snapshot file.

    Raises:
        CorpusError: If the file is missing, unreadable, not JSON, or holds
            malformed records.
    """
    path = Path(path)
    source = str(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise CorpusError(
            f"corpus snapshot not found: {source}",
            code=ErrorCode.CORPUS_NOT_FOUND,
            file_path=source,
            original_error=exc,
        ) from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CorpusError(
            f"corpus snapshot is not valid JSON: {exc}",
            file_path=source,
            original_error=exc,
        ) from exc
    except OSError as exc:
        raise CorpusError(
            f"corpus snapshot could not be read: {exc}",
            code=ErrorCode.CORPUS_READ_FAILED,
            file_path=source,
            original_error=exc,
        ) from exc

    corpus = corpus_from_dict(data, source)
    counts = ", ".join(f"{n} {kind}" for kind, n in corpus.counts().items())
    logger.info(f"Loaded corpus from {source}: {counts}")
    return corpus
