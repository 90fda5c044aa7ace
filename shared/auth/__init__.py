"""
Authentication Module
=====================

JWT-based authentication and authorization for the assurance API.

Features:
- JWT token generation and validation
- Role-based access control
- FastAPI dependencies for route protection

Usage:
    from shared.auth import User, get_current_user, require_admin

    @router.put("/projects/{project_id}")
    async def update(project_id: str, user: User = Depends(get_current_user)):
        ...

    @router.post("/professions/seed")
    async def seed(user: User = Depends(require_admin)):
        ...
"""

from shared.auth.jwt import (
    TokenData,
    create_access_token,
    decode_token,
)
from shared.auth.dependencies import (
    User,
    get_current_active_user,
    get_current_user,
    oauth2_scheme,
    require_admin,
    require_roles,
)

__all__ = [
    # JWT
    "create_access_token",
    "decode_token",
    "TokenData",
    # Dependencies
    "User",
    "get_current_user",
    "get_current_active_user",
    "require_admin",
    "require_roles",
    "oauth2_scheme",
]
