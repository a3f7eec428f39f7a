"""
Shared pytest fixtures for WOWSQL SDK tests.

HTTP traffic is intercepted with pytest-httpx's ``httpx_mock`` fixture, so
every client here talks to fake project URLs only.
"""

from typing import Generator

import pytest

from wowsql import ProjectAuthClient, WOWSQLClient, WOWSQLStorage

from sdk_test_support import ANON_KEY, PROJECT_SLUG, SERVICE_KEY


@pytest.fixture
def db_client() -> Generator[WOWSQLClient, None, None]:
    client = WOWSQLClient(PROJECT_SLUG, SERVICE_KEY)
    yield client
    client.close()


@pytest.fixture
def storage_client() -> Generator[WOWSQLStorage, None, None]:
    client = WOWSQLStorage(PROJECT_SLUG, SERVICE_KEY)
    yield client
    client.close()


@pytest.fixture
def auth_client() -> Generator[ProjectAuthClient, None, None]:
    client = ProjectAuthClient(PROJECT_SLUG, ANON_KEY)
    yield client
    client.close()
