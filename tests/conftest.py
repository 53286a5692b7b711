"""
Pytest configuration and shared fixtures.
"""

import pytest
from asgiref.sync import async_to_sync
from django.core.cache import cache

from corporations.domain.corporation import Corporation
from corporations.infrastructure.repositories.django_corporation_repository import (
    DjangoCorporationRepository,
)
from integrations.application.services.session_token_service import SessionTokenService
from integrations.domain.registered_app import RegisteredApp
from integrations.infrastructure.repositories.django_registered_app_repository import (
    DjangoRegisteredAppRepository,
)
from licenses.domain.license_key import LicenseKey
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)


@pytest.fixture(autouse=True)
def clear_cache():
    """Start every test with an empty cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def license_key_repository():
    """Fixture for LicenseKeyRepository."""
    return DjangoLicenseKeyRepository()


@pytest.fixture
def corporation_repository():
    """Fixture for CorporationRepository."""
    return DjangoCorporationRepository()


@pytest.fixture
def app_repository():
    """Fixture for RegisteredAppRepository."""
    return DjangoRegisteredAppRepository()


@pytest.fixture
def sample_corporation():
    """Fixture for a sample Corporation entity."""
    return Corporation.create(code="ACME", description="Acme Corp", town="Springfield")


@pytest.fixture
def db_corporation(db, corporation_repository, sample_corporation):
    """Fixture for a Corporation saved in database."""
    return async_to_sync(corporation_repository.save)(sample_corporation)


@pytest.fixture
def db_license_keys(db, license_key_repository):
    """Fixture for three free LicenseKeys saved in database."""
    keys = [LicenseKey.create(key=f"K{number}") for number in range(1, 4)]
    async_to_sync(license_key_repository.save_many)(keys)
    return [key.key for key in keys]


@pytest.fixture
def db_app(db, app_repository):
    """Fixture for a registered non-admin app and its raw key."""
    app, raw_key = RegisteredApp.register("Partner Portal")
    return async_to_sync(app_repository.save)(app), raw_key


@pytest.fixture
def db_admin_app(db, app_repository):
    """Fixture for a registered admin app and its raw key."""
    app, raw_key = RegisteredApp.register("Back Office", is_admin=True)
    return async_to_sync(app_repository.save)(app), raw_key


@pytest.fixture
def app_headers(db_app):
    """Session headers for the non-admin app."""
    app, _ = db_app
    token, _ = SessionTokenService().issue(app.id, app.is_admin)
    return {"HTTP_X_ACCESS_TOKEN": token}


@pytest.fixture
def admin_headers(db_admin_app):
    """Session headers for the admin app."""
    app, _ = db_admin_app
    token, _ = SessionTokenService().issue(app.id, app.is_admin)
    return {"HTTP_X_ACCESS_TOKEN": token}


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
