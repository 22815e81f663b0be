"""
Pytest configuration for BizDesk backend tests.

Sets up test environment and global fixtures.
"""
import os
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from cryptography.fernet import Fernet

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_KEY", Fernet.generate_key().decode())
os.environ.setdefault("API_BASE_URL", "http://testserver/api")


class FakeQuery:
    """
    Chainable stand-in for a PostgREST query builder.

    Every builder method returns the query itself; execute() returns an
    object with .data and .count taken from the next queued result.
    """

    def __init__(self, table: "FakeTable"):
        self.table = table
        self.calls: List[tuple] = []

    def __getattr__(self, name: str):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        data, count = self.table.next_result()
        return MagicMock(data=data, count=count)


class FakeTable:
    def __init__(self, name: str):
        self.name = name
        self.results: List[tuple] = []
        self.queries: List[FakeQuery] = []

    def queue(self, data: Any, count: Optional[int] = None) -> "FakeTable":
        self.results.append((data, count))
        return self

    def next_result(self) -> tuple:
        if self.results:
            return self.results.pop(0)
        return ([], None)

    def new_query(self) -> FakeQuery:
        query = FakeQuery(self)
        self.queries.append(query)
        return query

    def calls(self, method: str) -> List[tuple]:
        """All (args, kwargs) passed to ``method`` across this table's queries."""
        return [
            (args, kwargs)
            for query in self.queries
            for name, args, kwargs in query.calls
            if name == method
        ]


class FakeSupabase:
    """Minimal Supabase client: table(name) hands out queued results in order."""

    def __init__(self):
        self.tables: Dict[str, FakeTable] = {}

    def table(self, name: str) -> FakeQuery:
        return self[name].new_query()

    def __getitem__(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name)
        return self.tables[name]


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client for testing route wiring.
    Returns a MagicMock that simulates Supabase client behavior.
    """
    mock_client = MagicMock()
    return mock_client


@pytest.fixture
def fake_supabase():
    """Scriptable Supabase fake for service tests."""
    return FakeSupabase()
