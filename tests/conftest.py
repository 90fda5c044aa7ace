"""
Test Configuration
==================

Pytest fixtures for assurance API tests.
"""

import os
from typing import Any

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "testing"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def sample_project_data() -> dict[str, Any]:
    """Sample project data for tests."""
    return {
        "id": "p1",
        "name": "Apply for a fishing licence",
        "status": "GREEN",
        "commentary": "ok",
        "phase": "Alpha",
        "def_code": "DEF-001",
        "tags": ["Portfolio: Rural", "Priority"],
    }


@pytest.fixture
def sample_profession_data() -> dict[str, Any]:
    """Sample profession data for tests."""
    return {
        "id": "delivery-management",
        "name": "Delivery Management",
        "description": "Plans and runs delivery",
    }


@pytest.fixture
def sample_standard_data() -> dict[str, Any]:
    """Sample service standard data for tests."""
    return {
        "id": "std-1",
        "number": 1,
        "name": "Understand users and their needs",
        "description": "Develop a deep understanding of users",
        "guidance": "Talk to users early",
    }


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Generate test authentication headers for an administrator."""
    from shared.auth import create_access_token

    token = create_access_token({
        "sub": "test-admin-id",
        "email": "admin@assurance.test",
        "roles": ["user", "admin"],
    })
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers() -> dict[str, str]:
    """Generate test authentication headers for a non-admin user."""
    from shared.auth import create_access_token

    token = create_access_token({
        "sub": "test-user-id",
        "email": "user@assurance.test",
        "roles": ["user"],
    })
    return {"Authorization": f"Bearer {token}"}
