# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential schemes and the profiles their verifiers produce.

A scheme is plain configuration: the route its login form is posted to, the
pydantic model the form decodes into, the verifier, optional redirect
targets and the session cookie. Example::

    class PlainForm(BaseModel):
        username: str
        password: str

    async def verify(form: PlainForm, session_id: str) -> Optional[LocalProfile]:
        if USERS.get(form.username) == form.password:
            return LocalProfile(id=form.username, session_id=session_id)
        return None

    plain = CredentialScheme(
        name="plain",
        form=PlainForm,
        verify=verify,
        session_cookie=SessionCookie(name="plain_session"),
        login_route="/log-in",
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from credlocal.auth.session import SessionCookie

DEFAULT_LOGIN_ROUTE = "/login/local"
DEFAULT_PROVIDER = "HTTPLocal"


class LocalProfile(BaseModel):
    """Identity produced by a successful verification.

    Serializes as ``{"id": ..., "sessionId": ..., "provider": ...}``.
    Subclass to carry scheme-specific fields.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    session_id: str = Field(alias="sessionId")
    provider: str = DEFAULT_PROVIDER


Verifier = Callable[[Any, str], Union[Optional[LocalProfile], Awaitable[Optional[LocalProfile]]]]


@dataclass(frozen=True)
class CredentialScheme:
    name: str
    form: Type[BaseModel]
    verify: Verifier
    session_cookie: SessionCookie
    login_route: str = DEFAULT_LOGIN_ROUTE
    failure_redirect: Optional[str] = None
    success_redirect: Optional[str] = None
    provider: str = DEFAULT_PROVIDER
    logout_route: Optional[str] = None

    def __post_init__(self) -> None:
        if not (self.name or "").strip():
            raise ValueError("Credential scheme needs a name")
        for route in (self.login_route, self.logout_route):
            if route is not None and not route.startswith("/"):
                raise ValueError(f"Route must start with '/': {route!r}")
        if not callable(self.verify):
            raise TypeError(f"Scheme {self.name!r}: verify must be callable")

    def make_profile(self, id: str, session_id: str) -> LocalProfile:
        """Convenience for verifiers: a LocalProfile stamped with this scheme's provider."""
        return LocalProfile(id=id, session_id=session_id, provider=self.provider)
