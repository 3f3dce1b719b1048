"""Optional HTTP Basic auth for the service hook routes.

Hook requests carry Jira credentials in their body, so when ``AUTH_ENABLED``
is set every service hook route requires the configured Basic credentials.
``/health`` lives outside the protected router.
"""

from __future__ import annotations

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from jirasync.config import settings

REALM = "JiraSync"

_basic = HTTPBasic(realm=REALM, auto_error=False)


def credentials_match(credentials: HTTPBasicCredentials, username: str, password: str) -> bool:
    ok_user = secrets.compare_digest(credentials.username.encode(), username.encode())
    ok_pass = secrets.compare_digest(credentials.password.encode(), password.encode())
    return ok_user and ok_pass


def require_basic_auth(credentials: HTTPBasicCredentials | None = Depends(_basic)) -> None:
    """Route dependency; a no-op unless auth is enabled."""
    if not settings.auth_enabled:
        return
    if credentials is None or not credentials_match(
        credentials, settings.auth_username or "", settings.auth_password or ""
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": f'Basic realm="{REALM}", charset="UTF-8"'},
        )
