import pytest

pytest_plugins = [
    "tests.fixtures.db_fixtures",
    "tests.fixtures.store_fixtures",
    "tests.fixtures.session_fixtures",
]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep the developer's database settings out of tests."""
    for name in ("ENV", "ENVIRONMENT", "DATABASE_URL", "TEST_DATABASE_URL", "TOKEN_ENCRYPTION_KEY"):
        monkeypatch.delenv(name, raising=False)
