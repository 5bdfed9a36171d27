"""
Unit Tests

Unit tests run in isolation without external dependencies.
Redis is mocked and the record store is in memory.

These tests are fast and can run without Docker or any services running.
"""
