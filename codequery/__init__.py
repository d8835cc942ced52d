"""
codequery - Structured queries over introspected codebase metadata.

Answers filter queries over classes, data models, routes and views that an
external extractor has already scanned, providing:
- Wildcard name matching with index-view aliasing
- OR / AND value sets with include / exclude polarity per filter category
- One-hop usage-graph resolution between views
- An MCP tool surface and a CLI over the same query service
"""

__version__ = "0.1.0"
