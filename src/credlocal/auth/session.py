# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from itsdangerous import BadData, URLSafeTimedSerializer
from starlette.requests import Request

if TYPE_CHECKING:
    from credlocal.core.channel import ResponseChannel
    from credlocal.core.scheme import CredentialScheme, LocalProfile

logger = logging.getLogger(__name__)

DEFAULT_SALT = os.getenv("CREDLOCAL_SESSION_SALT", "credlocal.session.v1")
DEFAULT_MAX_AGE_SECONDS = int(os.getenv("CREDLOCAL_SESSION_MAX_AGE", "28800"))  # 8 hours


def cookie_settings() -> dict:
    secure = os.getenv("CREDLOCAL_COOKIE_SECURE", "false").lower() in {"1", "true", "yes", "y"}
    return {"httponly": True, "samesite": "lax", "secure": secure, "path": "/"}


@dataclass(frozen=True)
class SessionCookie:
    """Name and signing material of a scheme's session cookie.

    `secret` may be left empty, in which case SECRET_KEY (or
    CREDLOCAL_SECRET_KEY) is read from the environment at signing time.
    """

    name: str
    secret: Optional[str] = None
    salt: str = DEFAULT_SALT
    max_age: int = DEFAULT_MAX_AGE_SECONDS

    def serializer(self) -> URLSafeTimedSerializer:
        secret = self.secret or os.getenv("SECRET_KEY") or os.getenv("CREDLOCAL_SECRET_KEY")
        if not secret:
            raise RuntimeError(f"No secret for session cookie {self.name!r} (set SECRET_KEY)")
        return URLSafeTimedSerializer(secret_key=secret, salt=self.salt)


def sign_session_id(cookie: SessionCookie, session_id: str) -> str:
    return cookie.serializer().dumps({"sid": session_id})


def read_session_id(cookie: SessionCookie, token: str) -> Optional[str]:
    """Session id carried by a signed cookie value, or None if absent, forged or expired."""
    if not token:
        return None
    try:
        s = cookie.serializer()
    except RuntimeError:
        logger.warning("Cannot verify cookie %s: no signing secret configured", cookie.name)
        return None
    try:
        data = s.loads(token, max_age=cookie.max_age)
    except BadData:
        return None
    sid = str(data.get("sid") or "").strip() if isinstance(data, dict) else ""
    return sid or None


def session_id_from_request(request: Request, cookie: SessionCookie) -> Optional[str]:
    return read_session_id(cookie, request.cookies.get(cookie.name, ""))


class CookieAttacher:
    """Writes the signed session-id cookie onto the response channel."""

    def attach(
        self,
        request: Request,
        channel: "ResponseChannel",
        scheme: "CredentialScheme",
        profile: "LocalProfile",
    ) -> bool:
        cookie = scheme.session_cookie
        try:
            token = sign_session_id(cookie, profile.session_id)
        except RuntimeError as e:
            logger.error("Session cookie for scheme %s not attached: %s", scheme.name, e)
            return False
        channel.carrier.set_cookie(cookie.name, token, max_age=cookie.max_age, **cookie_settings())
        return True
