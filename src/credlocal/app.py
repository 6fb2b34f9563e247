# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Demo application with two local schemes.

- plain:   POST /log-in          (username, password)
- captcha: POST /captcha-log-in  (username, password, captcha)

Users come from data/users.yml (see scripts/create_user.py).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from credlocal.auth.session import SessionCookie
from credlocal.auth.users import DEFAULT_USERS_PATH, UserTable
from credlocal.core.scheme import CredentialScheme, LocalProfile
from credlocal.infra.session_store import InMemorySessionStore, SessionStore
from credlocal.permissions import profile_from_request, require_profile
from credlocal.routes import register_login, register_logout
from credlocal.services.authenticator import Authenticator

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

CAPTCHA_CODE = os.getenv("CREDLOCAL_CAPTCHA", "123456")


class PlainForm(BaseModel):
    username: str
    password: str


class CaptchaForm(PlainForm):
    captcha: Optional[str] = None


def build_schemes(users: UserTable, *, secret: Optional[str] = None):
    """Return (plain, captcha) schemes verifying against `users`."""

    async def verify_plain(form: PlainForm, session_id: str) -> Optional[LocalProfile]:
        u = await run_in_threadpool(users.authenticate, form.username, form.password)
        if not u:
            return None
        return plain.make_profile(u.username, session_id)

    async def verify_captcha(form: CaptchaForm, session_id: str) -> Optional[LocalProfile]:
        if form.captcha != CAPTCHA_CODE:
            return None
        u = await run_in_threadpool(users.authenticate, form.username, form.password)
        if not u:
            return None
        return captcha.make_profile(u.username, session_id)

    plain = CredentialScheme(
        name="plain",
        form=PlainForm,
        verify=verify_plain,
        session_cookie=SessionCookie(name="credlocal_plain", secret=secret),
        login_route="/log-in",
        logout_route="/logout",
    )
    captcha = CredentialScheme(
        name="captcha",
        form=CaptchaForm,
        verify=verify_captcha,
        session_cookie=SessionCookie(name="credlocal_captcha", secret=secret),
        login_route="/captcha-log-in",
    )
    return plain, captcha


def create_app(
    users_path: Path = DEFAULT_USERS_PATH,
    *,
    secret: Optional[str] = None,
    store: Optional[SessionStore] = None,
) -> FastAPI:
    app = FastAPI()
    store = store or InMemorySessionStore()
    plain, captcha = build_schemes(UserTable(users_path), secret=secret)
    authenticator = Authenticator(store)

    app.state.store = store
    app.state.schemes = {plain.name: plain, captcha.name: captcha}

    register_login(app, plain, authenticator=authenticator)
    register_login(app, captcha, authenticator=authenticator)
    register_logout(app, plain, store, redirect_to="/login")

    @app.get("/login", response_class=HTMLResponse)
    def login_get(request: Request):
        if profile_from_request(request, plain, store):
            return RedirectResponse(url="/private", status_code=303)
        return templates.TemplateResponse(
            request,
            "login.html",
            {"schemes": [plain, captcha]},
        )

    @app.get("/private")
    def private(profile: LocalProfile = Depends(require_profile(plain, store))):
        return profile.model_dump(by_alias=True)

    @app.get("/captcha-private")
    def captcha_private(profile: LocalProfile = Depends(require_profile(captcha, store))):
        return profile.model_dump(by_alias=True)

    return app


app = create_app()
