# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request

from credlocal.auth.session import session_id_from_request
from credlocal.core.scheme import CredentialScheme, LocalProfile
from credlocal.infra.session_store import SessionStore, SessionStoreError


def profile_from_request(request: Request, scheme: CredentialScheme, store: SessionStore) -> Optional[LocalProfile]:
    sid = session_id_from_request(request, scheme.session_cookie)
    if not sid:
        return None
    return store.lookup(scheme, sid)


def require_profile(scheme: CredentialScheme, store: SessionStore):
    """Dependency giving the scheme's authenticated profile.

    Unauthenticated requests get 401, or a 303 to the scheme's failure
    redirect when one is configured. Async: the store is only read on
    the event loop.
    """

    async def _dep(request: Request) -> LocalProfile:
        try:
            profile = profile_from_request(request, scheme, store)
        except SessionStoreError as e:
            raise HTTPException(status_code=500, detail="Session store unavailable") from e
        if profile is not None:
            return profile
        if scheme.failure_redirect:
            raise HTTPException(status_code=303, headers={"Location": scheme.failure_redirect})
        raise HTTPException(status_code=401, detail="Not authenticated")

    return _dep
