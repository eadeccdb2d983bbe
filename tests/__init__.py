"""
Test Suite

Contains unit tests for the price aggregator.

Structure:
- tests/unit/: Tests for individual components (pairs, adapters, cache, feeds, sampling loop, CLI)

Network access is never required: feed sessions are mocked.
Uses pytest with pytest-asyncio for testing async functionality.
"""
