"""
Tests for database URL handling.
"""

import pytest

from paceflow.db.session import _get_async_url


class TestAsyncUrl:

    @pytest.mark.parametrize("url, expected", [
        ("sqlite:///./paceflow.db", "sqlite+aiosqlite:///./paceflow.db"),
        ("postgresql://u:p@localhost/runs", "postgresql+asyncpg://u:p@localhost/runs"),
        ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
    ])
    def test_driver_selection(self, url, expected):
        assert _get_async_url(url) == expected
