"""Query tools: filter classes, models, routes and views."""

from typing import Any, Mapping, Optional

from codequery.mcp_server._shared import (
    _get_query_service,
    _success_response,
    _with_error_handling,
    mcp,
)
from codequery.query.registry import REGISTRIES, get_registry
from codequery.types.entities import EntityKind
from codequery.types.errors import ErrorCode, ValidationError

FilterList = Optional[list[str]]


def _active_filters(filters: Optional[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Drop categories the caller left unset or empty."""
    return {name: values for name, values in (filters or {}).items() if values}


def _run_query(kind: EntityKind, filters: Optional[Mapping[str, Any]]) -> dict:
    result = _get_query_service().query(kind, _active_filters(filters))
    return _success_response(kind.plural, result.message, result.items())


# =============================================================================
# Implementations
# =============================================================================


@_with_error_handling("query_classes")
def _query_classes_impl(filters: Optional[Mapping[str, Any]] = None) -> dict:
    """Implementation for query_classes tool."""
    return _run_query(EntityKind.CLASS, filters)


@_with_error_handling("query_models")
def _query_models_impl(filters: Optional[Mapping[str, Any]] = None) -> dict:
    """Implementation for query_models tool."""
    return _run_query(EntityKind.MODEL, filters)


@_with_error_handling("query_routes")
def _query_routes_impl(filters: Optional[Mapping[str, Any]] = None) -> dict:
    """Implementation for query_routes tool."""
    return _run_query(EntityKind.ROUTE, filters)


@_with_error_handling("query_views")
def _query_views_impl(filters: Optional[Mapping[str, Any]] = None) -> dict:
    """Implementation for query_views tool."""
    return _run_query(EntityKind.VIEW, filters)


@_with_error_handling("list_filter_categories")
def _list_filter_categories_impl(kind: Optional[str] = None) -> dict:
    """Implementation for list_filter_categories tool.

    Without ``kind`` the categories of every entity kind are listed.
    """
    if kind:
        try:
            kinds = [EntityKind(kind.lower())]
        except ValueError:
            raise ValidationError(
                f"Unknown entity kind '{kind}'",
                user_message=f"Kind must be one of: {', '.join(k.value for k in EntityKind)}.",
                code=ErrorCode.INVALID_ARGS,
            ) from None
    else:
        kinds = list(REGISTRIES)

    categories = [c for k in kinds for c in get_registry(k).describe()]
    return {
        "success": True,
        "message": f"Found {len(categories)} filter categories.",
        "filters": categories,
    }


# =============================================================================
# MCP Tool Registrations
# =============================================================================


@mcp.tool
def query_classes(
    name_equals_or: FilterList = None,
    name_equals_and: FilterList = None,
    name_doesnt_equal_or: FilterList = None,
    name_doesnt_equal_and: FilterList = None,
    implements_interfaces_or: FilterList = None,
    implements_interfaces_and: FilterList = None,
    doesnt_implement_interfaces_or: FilterList = None,
    doesnt_implement_interfaces_and: FilterList = None,
    uses_traits_or: FilterList = None,
    uses_traits_and: FilterList = None,
    doesnt_use_traits_or: FilterList = None,
    doesnt_use_traits_and: FilterList = None,
    extends_classes_or: FilterList = None,
    extends_classes_and: FilterList = None,
    doesnt_extend_classes_or: FilterList = None,
    doesnt_extend_classes_and: FilterList = None,
) -> dict:
    """Query classes by name, implemented interfaces, used traits and parent classes.

    Values inside an `_or` filter match if ANY value matches; values inside
    an `_and` filter must ALL match. Every filter given must hold. Negative
    filters (`doesnt_*`) drop the classes their positive twin would keep.
    All class filters accept `*` wildcards against fully qualified names,
    e.g. `App\\Http\\Controllers\\*` or `*Repository`.

    Args:
        name_equals_or: Keep classes whose name matches any value
        name_equals_and: Keep classes whose name matches every value
        name_doesnt_equal_or: Drop classes whose name matches any value
        name_doesnt_equal_and: Drop classes whose name matches every value
        implements_interfaces_or: Keep classes implementing any of the interfaces
        implements_interfaces_and: Keep classes implementing all of the interfaces
        doesnt_implement_interfaces_or: Drop classes implementing any of the interfaces
        doesnt_implement_interfaces_and: Drop classes implementing all of the interfaces
        uses_traits_or: Keep classes using any of the traits
        uses_traits_and: Keep classes using all of the traits
        doesnt_use_traits_or: Drop classes using any of the traits
        doesnt_use_traits_and: Drop classes using all of the traits
        extends_classes_or: Keep classes extending any of the parents
        extends_classes_and: Keep classes extending all of the parents
        doesnt_extend_classes_or: Drop classes extending any of the parents
        doesnt_extend_classes_and: Drop classes extending all of the parents

    Returns:
        A count message and the matching classes keyed by fully qualified name
    """
    return _query_classes_impl(locals())


@mcp.tool
def query_models(
    name_equals_or: FilterList = None,
    name_equals_and: FilterList = None,
    name_doesnt_equal_or: FilterList = None,
    name_doesnt_equal_and: FilterList = None,
    has_properties_or: FilterList = None,
    has_properties_and: FilterList = None,
    doesnt_have_properties_or: FilterList = None,
    doesnt_have_properties_and: FilterList = None,
    has_fillable_properties_or: FilterList = None,
    has_fillable_properties_and: FilterList = None,
    doesnt_have_fillable_properties_or: FilterList = None,
    doesnt_have_fillable_properties_and: FilterList = None,
    has_hidden_properties_or: FilterList = None,
    has_hidden_properties_and: FilterList = None,
    doesnt_have_hidden_properties_or: FilterList = None,
    doesnt_have_hidden_properties_and: FilterList = None,
    has_relations_or: FilterList = None,
    has_relations_and: FilterList = None,
    doesnt_have_relations_or: FilterList = None,
    doesnt_have_relations_and: FilterList = None,
    implements_interfaces_or: FilterList = None,
    implements_interfaces_and: FilterList = None,
    doesnt_implement_interfaces_or: FilterList = None,
    doesnt_implement_interfaces_and: FilterList = None,
    uses_traits_or: FilterList = None,
    uses_traits_and: FilterList = None,
    doesnt_use_traits_or: FilterList = None,
    doesnt_use_traits_and: FilterList = None,
    extends_classes_or: FilterList = None,
    extends_classes_and: FilterList = None,
    doesnt_extend_classes_or: FilterList = None,
    doesnt_extend_classes_and: FilterList = None,
) -> dict:
    """Query data models by name, properties, relations and class hierarchy.

    Combination rules are the same as for `query_classes`. Name, interface,
    trait and parent filters accept `*` wildcards. Property and relation
    filters match exact names only (`email`, `posts`).

    Args:
        name_equals_or: Keep models whose name matches any value
        name_equals_and: Keep models whose name matches every value
        name_doesnt_equal_or: Drop models whose name matches any value
        name_doesnt_equal_and: Drop models whose name matches every value
        has_properties_or: Keep models declaring any of the properties
        has_properties_and: Keep models declaring all of the properties
        doesnt_have_properties_or: Drop models declaring any of the properties
        doesnt_have_properties_and: Drop models declaring all of the properties
        has_fillable_properties_or: Keep models with any of the mass-assignable properties
        has_fillable_properties_and: Keep models with all of the mass-assignable properties
        doesnt_have_fillable_properties_or: Drop models with any of the mass-assignable properties
        doesnt_have_fillable_properties_and: Drop models with all of the mass-assignable properties
        has_hidden_properties_or: Keep models hiding any of the properties from serialization
        has_hidden_properties_and: Keep models hiding all of the properties from serialization
        doesnt_have_hidden_properties_or: Drop models hiding any of the properties
        doesnt_have_hidden_properties_and: Drop models hiding all of the properties
        has_relations_or: Keep models defining any of the relations
        has_relations_and: Keep models defining all of the relations
        doesnt_have_relations_or: Drop models defining any of the relations
        doesnt_have_relations_and: Drop models defining all of the relations
        implements_interfaces_or: Keep models implementing any of the interfaces
        implements_interfaces_and: Keep models implementing all of the interfaces
        doesnt_implement_interfaces_or: Drop models implementing any of the interfaces
        doesnt_implement_interfaces_and: Drop models implementing all of the interfaces
        uses_traits_or: Keep models using any of the traits
        uses_traits_and: Keep models using all of the traits
        doesnt_use_traits_or: Drop models using any of the traits
        doesnt_use_traits_and: Drop models using all of the traits
        extends_classes_or: Keep models extending any of the parents
        extends_classes_and: Keep models extending all of the parents
        doesnt_extend_classes_or: Drop models extending any of the parents
        doesnt_extend_classes_and: Drop models extending all of the parents

    Returns:
        A count message and the matching models keyed by fully qualified name
    """
    return _query_models_impl(locals())


@mcp.tool
def query_routes(
    name_equals_or: FilterList = None,
    name_equals_and: FilterList = None,
    name_doesnt_equal_or: FilterList = None,
    name_doesnt_equal_and: FilterList = None,
    path_equals_or: FilterList = None,
    path_equals_and: FilterList = None,
    path_doesnt_equal_or: FilterList = None,
    path_doesnt_equal_and: FilterList = None,
    uses_controller_or: FilterList = None,
    uses_controller_and: FilterList = None,
    doesnt_use_controller_or: FilterList = None,
    doesnt_use_controller_and: FilterList = None,
    uses_middleware_or: FilterList = None,
    uses_middleware_and: FilterList = None,
    doesnt_use_middleware_or: FilterList = None,
    doesnt_use_middleware_and: FilterList = None,
    has_parameter_or: FilterList = None,
    has_parameter_and: FilterList = None,
    doesnt_have_parameter_or: FilterList = None,
    doesnt_have_parameter_and: FilterList = None,
) -> dict:
    """Query routes by name, URI, controller, middleware and parameters.

    Combination rules are the same as for `query_classes`. Name, URI and
    controller class filters accept `*` wildcards; middleware and parameter
    filters match exactly. A controller value may name a method after a
    comma or `@`: `App\\Http\\Controllers\\PostController, index`. Routes
    bound to a closure never match a controller filter.

    Args:
        name_equals_or: Keep routes whose name matches any value (`admin.*`)
        name_equals_and: Keep routes whose name matches every value
        name_doesnt_equal_or: Drop routes whose name matches any value
        name_doesnt_equal_and: Drop routes whose name matches every value
        path_equals_or: Keep routes whose URI matches any value (`api/*`)
        path_equals_and: Keep routes whose URI matches every value
        path_doesnt_equal_or: Drop routes whose URI matches any value
        path_doesnt_equal_and: Drop routes whose URI matches every value
        uses_controller_or: Keep routes handled by any of the controllers
        uses_controller_and: Keep routes handled by all of the controllers
        doesnt_use_controller_or: Drop routes handled by any of the controllers
        doesnt_use_controller_and: Drop routes handled by all of the controllers
        uses_middleware_or: Keep routes using any of the middleware
        uses_middleware_and: Keep routes using all of the middleware
        doesnt_use_middleware_or: Drop routes using any of the middleware
        doesnt_use_middleware_and: Drop routes using all of the middleware
        has_parameter_or: Keep routes with any of the path parameters
        has_parameter_and: Keep routes with all of the path parameters
        doesnt_have_parameter_or: Drop routes with any of the path parameters
        doesnt_have_parameter_and: Drop routes with all of the path parameters

    Returns:
        A count message and the matching routes in declaration order
    """
    return _query_routes_impl(locals())


@mcp.tool
def query_views(
    name_equals: FilterList = None,
    name_equals_and: FilterList = None,
    name_doesnt_equal: FilterList = None,
    name_doesnt_equal_and: FilterList = None,
    uses: FilterList = None,
    uses_and: FilterList = None,
    doesnt_use: FilterList = None,
    doesnt_use_and: FilterList = None,
    used_by: FilterList = None,
    used_by_and: FilterList = None,
    not_used_by: FilterList = None,
    not_used_by_and: FilterList = None,
) -> dict:
    """Query views by name and by the views they use or are used by.

    View names are namespaced dotted paths (`filament::components.button`).
    All filters accept `*` wildcards. A view named `index` inside a
    subdirectory also matches its directory name, so `*button` matches
    `filament::components.button.index`. Usage filters look exactly one
    level deep: `used_by` finds views that the matching views include
    directly, not views included by those.

    Filters without a suffix match ANY of their values; the `_and`
    variants require ALL of them.

    Args:
        name_equals: Keep views whose name matches any value
        name_equals_and: Keep views whose name matches every value
        name_doesnt_equal: Drop views whose name matches any value
        name_doesnt_equal_and: Drop views whose name matches every value
        uses: Keep views that include or invoke any matching view
        uses_and: Keep views that include or invoke a match for every value
        doesnt_use: Drop views that include or invoke any matching view
        doesnt_use_and: Drop views that include or invoke a match for every value
        used_by: Keep views included directly by any matching view
        used_by_and: Keep views included directly by a match for every value
        not_used_by: Drop views included directly by any matching view
        not_used_by_and: Drop views included directly by a match for every value

    Returns:
        A count message and the matching views with their direct usages
    """
    return _query_views_impl(locals())


@mcp.tool
def list_filter_categories(kind: Optional[str] = None) -> dict:
    """List the filter categories each query tool accepts.

    Args:
        kind: One of "class", "model", "route", "view"; omit for all kinds

    Returns:
        Category names with the attribute they read, the comparison used,
        whether they include or exclude, and how their values combine
    """
    return _list_filter_categories_impl(kind)
