"""Phase 10: MCP tool implementations, error handling and path sanitization."""
