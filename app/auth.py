"""
app/auth.py

Shared-password gate (HTTP Basic). Disabled when APP_PASSWORD is unset; only the
password half of the credentials is checked.
"""

from __future__ import annotations

import base64
import binascii
import secrets
from typing import Optional

from fastapi import Request
from fastapi.responses import PlainTextResponse

from app.settings import get_settings

EXEMPT_PATHS = {"/api/ping"}


def basic_auth_password(header: Optional[str]) -> Optional[str]:
    """Password part of a `Basic <base64(user:password)>` header, or None if malformed."""
    if not header or not header.startswith("Basic "):
        return None
    try:
        decoded = base64.b64decode(header.split(" ", 1)[1].strip()).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    _user, sep, password = decoded.partition(":")
    return password if sep else None


async def password_gate(request: Request, call_next):
    settings = get_settings()
    expected = settings.app_password
    if not expected or request.method == "OPTIONS" or request.url.path in EXEMPT_PATHS:
        return await call_next(request)

    header = request.headers.get("authorization")
    if not header or not header.startswith("Basic "):
        return PlainTextResponse(
            "Authentication required",
            status_code=401,
            headers={"WWW-Authenticate": f'Basic realm="{settings.auth_realm}"'},
        )

    supplied = basic_auth_password(header)
    if supplied is None or not secrets.compare_digest(supplied.encode(), expected.encode()):
        return PlainTextResponse("Invalid credentials", status_code=401)
    return await call_next(request)
