# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Session store: resolves request sessions and keeps authenticated profiles.

Profiles are namespaced by scheme name, so two schemes never see each
other's sessions even if a session id happened to collide.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from starlette.requests import Request

from credlocal.auth.session import session_id_from_request
from credlocal.core.scheme import CredentialScheme, LocalProfile

logger = logging.getLogger(__name__)


class SessionStoreError(RuntimeError):
    """The session backend cannot serve the request."""


@dataclass(frozen=True)
class ResolvedSession:
    profile: Optional[LocalProfile] = None
    session_id: Optional[str] = None
    error: Optional[str] = None


def new_session_id() -> str:
    return secrets.token_urlsafe(24)


class SessionStore:
    """Base store. Subclasses provide `lookup`, `save` and `discard`."""

    def resolve(self, request: Request, scheme: CredentialScheme) -> ResolvedSession:
        """Find the request's session or allocate a new id.

        Backend faults come back in `error`, never as exceptions.
        """
        sid = session_id_from_request(request, scheme.session_cookie)
        try:
            if sid:
                profile = self.lookup(scheme, sid)
                if profile is not None:
                    return ResolvedSession(profile=profile, session_id=sid)
                return ResolvedSession(session_id=sid)
            return ResolvedSession(session_id=self.allocate(scheme))
        except SessionStoreError as e:
            logger.error("Session store unavailable for scheme %s: %s", scheme.name, e)
            return ResolvedSession(error=str(e))

    def allocate(self, scheme: CredentialScheme) -> str:
        return new_session_id()

    def lookup(self, scheme: CredentialScheme, session_id: str) -> Optional[LocalProfile]:
        raise NotImplementedError

    def save(self, scheme: CredentialScheme, profile: LocalProfile) -> None:
        raise NotImplementedError

    def discard(self, scheme: CredentialScheme, session_id: str) -> None:
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    """Process-local store. Operations never await, so each one is atomic on the event loop."""

    def __init__(self) -> None:
        self._profiles: Dict[Tuple[str, str], LocalProfile] = {}

    def lookup(self, scheme: CredentialScheme, session_id: str) -> Optional[LocalProfile]:
        return self._profiles.get((scheme.name, session_id))

    def save(self, scheme: CredentialScheme, profile: LocalProfile) -> None:
        self._profiles[(scheme.name, profile.session_id)] = profile

    def discard(self, scheme: CredentialScheme, session_id: str) -> None:
        self._profiles.pop((scheme.name, session_id), None)

    def __len__(self) -> int:
        return len(self._profiles)
