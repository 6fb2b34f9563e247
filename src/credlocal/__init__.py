# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pluggable local (username/password style) login for FastAPI apps."""

from credlocal.auth.session import SessionCookie
from credlocal.core.outcome import Failure, Reason, Redirect, Skip, Success
from credlocal.core.scheme import CredentialScheme, LocalProfile
from credlocal.infra.session_store import InMemorySessionStore, SessionStore
from credlocal.routes import register_login, register_logout
from credlocal.services.authenticator import Authenticator

__all__ = [
    "Authenticator",
    "CredentialScheme",
    "Failure",
    "InMemorySessionStore",
    "LocalProfile",
    "Reason",
    "Redirect",
    "SessionCookie",
    "SessionStore",
    "Skip",
    "Success",
    "register_login",
    "register_logout",
]
