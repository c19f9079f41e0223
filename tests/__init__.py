"""
Open Douban Test Suite

Tests are organized into:
- unit/: Unit tests for client, resolver, enrichment, mapping and provider
- integration/: Tests for the HTTP API
"""
