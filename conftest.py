"""
Shared pytest fixtures.
"""

import pytest

from elysiar.database import get_engine, init_db


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with all tables."""
    engine = get_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()
