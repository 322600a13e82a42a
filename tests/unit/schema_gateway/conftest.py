import pytest

from schema_gateway.config.settings import DatabaseSettings, GatewaySettings
from tests._support.gateway_doubles import FakeDatabase


@pytest.fixture
def settings():
    return GatewaySettings(database=DatabaseSettings(password="secret"))


@pytest.fixture
def fake_db():
    return FakeDatabase()
