"""
pytest configuration and fixtures for the integrity suite
Every test that asks for ``ctx`` runs once per selected backend
"""

import pytest
import pytest_asyncio

from library_integrity.config import configure_logging, get_settings
from library_integrity.testing import open_integrity_context

BACKEND_CHOICES = ("memory", "postgres", "all")


def pytest_addoption(parser):
    parser.addoption(
        "--backend",
        action="store",
        default="all",
        choices=BACKEND_CHOICES,
        help="Store backend(s) to exercise; postgres cases skip without DATABASE_URL",
    )


def _selected_backends(config):
    choice = config.getoption("--backend")
    return ["memory", "postgres"] if choice == "all" else [choice]


def pytest_generate_tests(metafunc):
    if "backend" in metafunc.fixturenames:
        metafunc.parametrize("backend", _selected_backends(metafunc.config))


@pytest.fixture(scope="session")
def settings():
    """Validated settings for the whole session"""
    settings = get_settings()
    configure_logging(settings.log_level)
    return settings


@pytest_asyncio.fixture(scope="function")
async def ctx(settings, backend):
    """Fresh integrity context; tracked rows are removed after the test"""
    if backend == "postgres" and not settings.postgres_available:
        pytest.skip("DATABASE_URL not configured")

    async with open_integrity_context(settings, backend) as context:
        yield context
