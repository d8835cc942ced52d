"""Runtime settings read from the environment.

| variable              | default                    |
|-----------------------|----------------------------|
| CODEQUERY_CORPUS      | .codequery/corpus.json     |
| CODEQUERY_LOG_LEVEL   | INFO                       |
| CODEQUERY_TOON        | true                       |
| CODEQUERY_INDEX_NAME  | index                      |

CLI options override these values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping

from codequery.constants import DEFAULT_CORPUS_PATH, VIEW_INDEX_NAME
from codequery.types.errors import ConfigurationError, ErrorContext

_LOG_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"})
_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(
        f"{name} must be a boolean, got {raw!r}",
        context=ErrorContext(operation="load_settings", additional_info={name: raw}),
    )


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for the server and the CLI."""

    corpus_path: str = DEFAULT_CORPUS_PATH
    log_level: str = "INFO"
    toon_enabled: bool = True
    view_index_name: str = VIEW_INDEX_NAME

    def __post_init__(self) -> None:
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level {self.log_level!r}",
                user_message=f"Log level must be one of {', '.join(sorted(_LOG_LEVELS))}.",
            )
        if not self.view_index_name or "." in self.view_index_name:
            raise ConfigurationError(
                f"Invalid view index name {self.view_index_name!r}",
                user_message="The view index name must be a single, non-empty path segment.",
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            corpus_path=env.get("CODEQUERY_CORPUS") or DEFAULT_CORPUS_PATH,
            log_level=(env.get("CODEQUERY_LOG_LEVEL") or "INFO").upper(),
            toon_enabled=_parse_bool("CODEQUERY_TOON", env.get("CODEQUERY_TOON", "true")),
            view_index_name=env.get("CODEQUERY_INDEX_NAME") or VIEW_INDEX_NAME,
        )

    def with_overrides(self, **overrides: object) -> "Settings":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
