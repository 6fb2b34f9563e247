# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP binding of the login handshake.

`register_login` mounts `POST scheme.login_route` and turns the
authenticator's outcome into exactly one response.
"""

from __future__ import annotations

import logging
from typing import Union

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from credlocal.auth.session import cookie_settings, session_id_from_request
from credlocal.core.channel import ResponseChannel
from credlocal.core.outcome import Failure, Outcome, Redirect, Skip, Success
from credlocal.core.scheme import CredentialScheme
from credlocal.infra.session_store import SessionStore
from credlocal.services.authenticator import Authenticator

logger = logging.getLogger(__name__)

Router = Union[APIRouter, FastAPI]


def outcome_to_response(outcome: Outcome) -> Response:
    if isinstance(outcome, Success):
        return JSONResponse(outcome.profile.model_dump(by_alias=True), status_code=200)
    if isinstance(outcome, Redirect):
        return RedirectResponse(url=outcome.target, status_code=303)
    if isinstance(outcome, (Failure, Skip)):
        return JSONResponse({"detail": outcome.reason.value}, status_code=outcome.status_code)
    raise TypeError(f"Unknown outcome: {outcome!r}")


def register_login(router: Router, *schemes: CredentialScheme, authenticator: Authenticator) -> None:
    """Bind POST on the schemes' shared login route.

    Schemes are tried in order; a scheme whose form does not match the body
    (Skip) hands the request to the next one. The last outcome answers.
    """
    if not schemes:
        raise ValueError("register_login needs at least one scheme")
    route = schemes[0].login_route
    others = [s.name for s in schemes if s.login_route != route]
    if others:
        raise ValueError(f"Schemes {others} are not bound to {route}")

    @router.post(route, name="login_" + "_".join(s.name for s in schemes))
    async def login(request: Request):
        channel = ResponseChannel()
        outcome: Outcome = Skip()
        for scheme in schemes:
            outcome = await authenticator.authenticate(request, scheme, channel)
            if not isinstance(outcome, Skip):
                break
        return channel.finish(outcome_to_response(outcome))


def register_logout(
    router: Router,
    scheme: CredentialScheme,
    store: SessionStore,
    *,
    redirect_to: str = "/",
) -> None:
    """Bind POST scheme.logout_route: drop the session, clear the cookie, 303 to `redirect_to`."""
    if not scheme.logout_route:
        raise ValueError(f"Scheme {scheme.name!r} has no logout_route")

    @router.post(scheme.logout_route, name=f"logout_{scheme.name}")
    async def logout(request: Request):
        sid = session_id_from_request(request, scheme.session_cookie)
        if sid:
            store.discard(scheme, sid)
            logger.info("Scheme %s: session closed", scheme.name)
        resp = RedirectResponse(url=redirect_to, status_code=303)
        settings = cookie_settings()
        resp.delete_cookie(
            scheme.session_cookie.name,
            path=settings["path"],
            secure=settings["secure"],
            httponly=settings["httponly"],
            samesite=settings["samesite"],
        )
        return resp
