# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from starlette.responses import Response


class ResponseChannel:
    """Collects side effects (cookies) for a response that is built later.

    `finish` may be called once; the cookies set on `carrier` are copied onto
    the finalized response.
    """

    def __init__(self) -> None:
        self.carrier = Response()
        self._response: Optional[Response] = None

    @property
    def finished(self) -> bool:
        return self._response is not None

    @property
    def response(self) -> Optional[Response]:
        return self._response

    def finish(self, response: Response) -> Response:
        if self._response is not None:
            raise RuntimeError("Response already finalized for this request")
        for value in self.carrier.headers.getlist("set-cookie"):
            response.headers.append("set-cookie", value)
        self._response = response
        return response
