"""Test suite for openbank-aggregator.

Test structure:
- unit/: Unit tests - components in isolation, HTTP mocked with pytest-httpx
- integration/: Repository and end-to-end sync tests against SQLite (aiosqlite)
"""
