"""Phase 13: TOON Format Integration Tests.

Tests for Token-Oriented Object Notation (TOON) encoding of MCP responses.

Test Modules:
- test_toon_encoder.py: ToonEncoder wrapper and structural eligibility
"""
