# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Terminal results of one login attempt.

Every attempt ends in exactly one of `Success`, `Redirect`, `Failure` or
`Skip`. Failures and skips carry a `Reason`, which knows its HTTP status.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from credlocal.core.scheme import LocalProfile


class Reason(str, Enum):
    SESSION_UNAVAILABLE = "session_unavailable"
    MALFORMED_FORM = "malformed_form"
    INVALID_CREDENTIALS = "invalid_credentials"
    COOKIE_ATTACH_FAILED = "cookie_attach_failed"

    @property
    def status_code(self) -> int:
        return _STATUS[self]


_STATUS = {
    Reason.SESSION_UNAVAILABLE: 500,
    Reason.MALFORMED_FORM: 400,
    Reason.INVALID_CREDENTIALS: 401,
    Reason.COOKIE_ATTACH_FAILED: 500,
}


@dataclass(frozen=True)
class Success:
    profile: LocalProfile


@dataclass(frozen=True)
class Redirect:
    target: str


@dataclass(frozen=True)
class Failure:
    reason: Reason

    @property
    def status_code(self) -> int:
        return self.reason.status_code


@dataclass(frozen=True)
class Skip:
    """The request does not have this scheme's shape; another handler may take it."""

    reason: Reason = Reason.MALFORMED_FORM

    @property
    def status_code(self) -> int:
        return self.reason.status_code


Outcome = Union[Success, Redirect, Failure, Skip]
