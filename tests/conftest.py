"""
Shared fixtures for the desk test suite
"""
from datetime import datetime

import pytest

from resolution_desk.config.settings import TestingConfig
from resolution_desk.core.audit import AuditTrail
from resolution_desk.desk_app import create_app

# Demo records are dated early 2024, so the suite runs on a fixed clock
FIXED_NOW = datetime(2024, 1, 20, 10, 0)


def fixed_clock():
    return FIXED_NOW


@pytest.fixture
def clock():
    return fixed_clock


@pytest.fixture
def audit():
    return AuditTrail(max_entries=100, clock=fixed_clock)


@pytest.fixture
def app():
    app = create_app(TestingConfig, clock=fixed_clock)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
