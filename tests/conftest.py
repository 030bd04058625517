import os
import sys
import pytest

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from agrimarket.config import Settings
from agrimarket.marketplace import Marketplace
from agrimarket.storage import InMemoryKeyValueStore


def make_settings(**overrides) -> Settings:
    values = {"storage_backend": "memory", **overrides}
    return Settings(_env_file=None, **values)


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def market(kv):
    return Marketplace(kv, make_settings())


@pytest.fixture
def farmer(market):
    user = market.session.register({"name": "Ramesh", "email": "ramesh@example.com", "role": "farmer", "location": "Pune"})
    market.session.logout()
    return user


@pytest.fixture
def buyer(market):
    user = market.session.register({"name": "Anita", "email": "anita@example.com", "role": "buyer"})
    market.session.logout()
    return user
