"""Test harness for unit tests and runs against a live portal API.

Settings are loaded from environment variables (configure via .env or export).
"""

import pytest_asyncio

from portal.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Yields request-scoped container for service access

    Args:
        unmock: Components to use real implementations for

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - in-memory comment API and fixed clock
        unit_env = create_env_fixture()

        @pytest.mark.asyncio
        async def test_load(unit_env):
            factory = await unit_env.get(CommentThreadFactory)
            thread = factory.open(scope, session)
            await thread.refresh()
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(unmock=unmock or set())

        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment
