# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Login handshake for local credential schemes.

One call to `Authenticator.authenticate` drives a single attempt:

1. resolve or create the session (an authenticated session short-circuits)
2. decode the posted form into the scheme's model
3. call the scheme's verifier once
4. save the profile, attach the session cookie
5. answer with the profile or the configured redirect

Configured redirects replace the answer: the success redirect applies to
fresh logins and to already authenticated sessions alike, the failure
redirect replaces any structured failure or skip.
"""

from __future__ import annotations

import inspect
import logging
from typing import Optional

from starlette.requests import Request

from credlocal.auth.session import CookieAttacher
from credlocal.core.channel import ResponseChannel
from credlocal.core.forms import FormDecodeError, FormDecoder
from credlocal.core.outcome import Failure, Outcome, Reason, Redirect, Skip, Success
from credlocal.core.scheme import CredentialScheme, LocalProfile
from credlocal.infra.session_store import SessionStore

logger = logging.getLogger(__name__)


class Authenticator:
    def __init__(
        self,
        store: SessionStore,
        *,
        decoder: Optional[FormDecoder] = None,
        cookies: Optional[CookieAttacher] = None,
    ) -> None:
        self.store = store
        self.decoder = decoder or FormDecoder()
        self.cookies = cookies or CookieAttacher()

    async def authenticate(
        self,
        request: Request,
        scheme: CredentialScheme,
        channel: ResponseChannel,
    ) -> Outcome:
        resolved = self.store.resolve(request, scheme)
        if resolved.profile is not None:
            logger.debug("Scheme %s: session already authenticated as %s", scheme.name, resolved.profile.id)
            return _succeed(scheme, resolved.profile)

        session_id = resolved.session_id
        if not session_id:
            logger.warning("Scheme %s: no session available (%s)", scheme.name, resolved.error or "unknown")
            return _fail(scheme, Failure(Reason.SESSION_UNAVAILABLE))

        try:
            form = await self.decoder.decode(request, scheme.form)
        except FormDecodeError as e:
            logger.info("Scheme %s: skipping request, %s", scheme.name, e)
            return _fail(scheme, Skip(Reason.MALFORMED_FORM))

        profile = await _verify_once(scheme, form, session_id)

        if profile is None:
            logger.info("Scheme %s: credentials rejected", scheme.name)
            return _fail(scheme, Failure(Reason.INVALID_CREDENTIALS))

        self.store.save(scheme, profile)
        if not self.cookies.attach(request, channel, scheme, profile):
            logger.error("Scheme %s: %s verified but session cookie could not be attached", scheme.name, profile.id)
            return _fail(scheme, Failure(Reason.COOKIE_ATTACH_FAILED))

        logger.info("Scheme %s: %s logged in", scheme.name, profile.id)
        return _succeed(scheme, profile)


async def _verify_once(scheme: CredentialScheme, form, session_id: str) -> Optional[LocalProfile]:
    result = scheme.verify(form, session_id)
    if inspect.isawaitable(result):
        result = await result
    if result is None:
        return None
    if not isinstance(result, LocalProfile):
        raise TypeError(f"Scheme {scheme.name!r}: verifier returned {type(result).__name__}, expected LocalProfile")
    if result.session_id != session_id:
        raise ValueError(f"Scheme {scheme.name!r}: verifier returned a profile for another session")
    return result


def _succeed(scheme: CredentialScheme, profile: LocalProfile) -> Outcome:
    if scheme.success_redirect:
        return Redirect(scheme.success_redirect)
    return Success(profile)


def _fail(scheme: CredentialScheme, outcome: Outcome) -> Outcome:
    if scheme.failure_redirect:
        return Redirect(scheme.failure_redirect)
    return outcome
