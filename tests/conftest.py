import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path
from typing import Dict, Optional

import pytest
from pydantic import BaseModel
from starlette.requests import Request

from credlocal.auth.session import SessionCookie
from credlocal.auth.users import UserTable
from credlocal.core.scheme import CredentialScheme, LocalProfile

USERS = {"John": "12345", "Mary": "qwerasdf"}


class UserForm(BaseModel):
    username: str
    password: str


@pytest.fixture()
def users_path(tmp_path: Path) -> Path:
    """users.yml in a temp dir holding argon2 hashes for John and Mary."""
    table = UserTable(tmp_path / "data" / "users.yml")
    for username, password in USERS.items():
        table.put_user(username, password)
    return table.path


@pytest.fixture()
def secret(monkeypatch) -> str:
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    return "test-secret"


@pytest.fixture()
def no_secret(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    monkeypatch.delenv("CREDLOCAL_SECRET_KEY", raising=False)


class CountingVerifier:
    """Checks USERS and records every call."""

    def __init__(self) -> None:
        self.calls = []

    async def __call__(self, form: UserForm, session_id: str) -> Optional[LocalProfile]:
        self.calls.append((form, session_id))
        if USERS.get(form.username) == form.password:
            return LocalProfile(id=form.username, session_id=session_id)
        return None


@pytest.fixture()
def verifier() -> CountingVerifier:
    return CountingVerifier()


@pytest.fixture()
def make_scheme(verifier):
    def _make(**overrides) -> CredentialScheme:
        kwargs = dict(
            name="plain",
            form=UserForm,
            verify=verifier,
            session_cookie=SessionCookie(name="plain_session", secret="s3cret"),
            login_route="/log-in",
        )
        kwargs.update(overrides)
        return CredentialScheme(**kwargs)

    return _make


@pytest.fixture()
def make_request():
    """Build a bare Starlette POST request with a fixed body."""

    def _make(
        body: bytes = b"",
        *,
        content_type: Optional[str] = "application/x-www-form-urlencoded",
        cookies: Optional[Dict[str, str]] = None,
        path: str = "/log-in",
    ) -> Request:
        headers = []
        if content_type:
            headers.append((b"content-type", content_type.encode("latin-1")))
        if cookies:
            headers.append((b"cookie", "; ".join(f"{k}={v}" for k, v in cookies.items()).encode("latin-1")))

        async def receive():
            return {"type": "http.request", "body": body, "more_body": False}

        scope = {
            "type": "http",
            "method": "POST",
            "path": path,
            "root_path": "",
            "scheme": "http",
            "server": ("testserver", 80),
            "query_string": b"",
            "headers": headers,
        }
        return Request(scope, receive)

    return _make
