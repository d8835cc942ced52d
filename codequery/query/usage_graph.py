"""Usage graph between views.

An edge A -> B means view A references view B, either by including it or
by invoking it as a component. The graph is built once per query from the
views in the corpus and answers one-hop questions only: what a view uses,
and which views use it. It never follows edges transitively.

Index aliasing: a view whose leaf segment is ``index`` and which sits in a
subdirectory (``ns::components.button.index``) is also addressed by its
parent path (``ns::components.button``). The alias is honoured both when
matching names against patterns and when resolving references to views.
"""

from __future__ import annotations

from typing import Iterable

from codequery.constants import VIEW_INDEX_NAME, VIEW_NAMESPACE_SEPARATOR
from codequery.types.entities import ViewEntity


def view_alias(name: str, index_name: str = VIEW_INDEX_NAME) -> str | None:
    """Return the parent-directory alias of an index view, if it has one.

    Examples:
        >>> view_alias("ns::components.button.index")
        'ns::components.button'
        >>> view_alias("index") is None
        True
    """
    if VIEW_NAMESPACE_SEPARATOR in name:
        path = name.split(VIEW_NAMESPACE_SEPARATOR, 1)[1]
    else:
        path = name
    segments = path.split(".")
    if len(segments) < 2 or segments[-1] != index_name:
        return None
    return name[: -(len(index_name) + 1)]


def view_name_candidates(name: str, index_name: str = VIEW_INDEX_NAME) -> tuple[str, ...]:
    """All names a pattern may match to address the view called ``name``."""
    alias = view_alias(name, index_name)
    if alias is None:
        return (name,)
    return (name, alias)


def _dedupe(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


class UsageGraph:
    """One-hop reference graph over a set of views.

    References that name a view outside the corpus stay in the graph as
    dangling targets: they still count for ``uses`` but have no outgoing
    edges of their own.
    """

    def __init__(
        self,
        views: Iterable[ViewEntity],
        index_name: str = VIEW_INDEX_NAME,
    ) -> None:
        self._index_name = index_name
        self._views: dict[str, ViewEntity] = {}
        self._aliases: dict[str, str] = {}

        for view in views:
            self._views.setdefault(view.name, view)
            alias = view_alias(view.name, index_name)
            if alias is not None:
                self._aliases.setdefault(alias, view.name)

        self._outgoing: dict[str, tuple[str, ...]] = {}
        incoming: dict[str, list[str]] = {}
        for name, view in self._views.items():
            targets = _dedupe(self.resolve(ref) or ref for ref in view.references)
            self._outgoing[name] = targets
            for target in targets:
                if target in self._views:
                    incoming.setdefault(target, []).append(name)
        self._incoming = {k: _dedupe(v) for k, v in incoming.items()}

    def __len__(self) -> int:
        return len(self._views)

    def __contains__(self, name: object) -> bool:
        return name in self._views

    def resolve(self, reference: str) -> str | None:
        """Resolve a written reference to the name of a view in the graph.

        An exact name wins over an index alias.
        """
        if reference in self._views:
            return reference
        return self._aliases.get(reference)

    def dependencies(self, view: ViewEntity) -> tuple[str, ...]:
        """Views referenced by ``view`` (resolved names, dangling ones as written)."""
        if view.name in self._outgoing:
            return self._outgoing[view.name]
        return _dedupe(self.resolve(ref) or ref for ref in view.references)

    def dependents(self, view: ViewEntity) -> tuple[str, ...]:
        """Views in the graph that reference ``view`` directly."""
        return self._incoming.get(view.name, ())

    def uses_candidates(self, view: ViewEntity) -> tuple[str, ...]:
        """Every name under which a target of ``view`` can be matched."""
        names: list[str] = []
        for ref in view.references:
            names.extend(view_name_candidates(ref, self._index_name))
            resolved = self.resolve(ref)
            if resolved is not None and resolved != ref:
                names.extend(view_name_candidates(resolved, self._index_name))
        return _dedupe(names)

    def used_by_candidates(self, view: ViewEntity) -> tuple[str, ...]:
        """Every name under which a direct referrer of ``view`` can be matched."""
        names: list[str] = []
        for referrer in self.dependents(view):
            names.extend(view_name_candidates(referrer, self._index_name))
        return _dedupe(names)
