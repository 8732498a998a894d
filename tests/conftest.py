import pytest

from catalog_api.config import get_settings
from catalog_api.database import SEED_PRODUCTS, STORE


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch):
    """Every test starts from the seeded catalog and default settings."""
    for var in ("API_KEY", "APP_ENV", "ENVIRONMENT", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    STORE.reset(SEED_PRODUCTS)
    yield
    get_settings.cache_clear()
