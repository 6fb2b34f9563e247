# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import json
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError
from starlette.formparsers import MultiPartException
from starlette.requests import Request

FormT = TypeVar("FormT", bound=BaseModel)


class FormDecodeError(ValueError):
    """The request body cannot be read as the requested form."""


class FormDecoder:
    """Decodes a request body into a pydantic form model.

    URL-encoded and multipart bodies are read through Starlette's form parser
    (cached on the request, so several schemes can decode the same body).
    JSON bodies are accepted as well.
    """

    async def decode(self, request: Request, shape: Type[FormT]) -> FormT:
        data = await self._read(request)
        try:
            return shape.model_validate(data)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise FormDecodeError(f"{shape.__name__}: invalid or missing fields ({fields})") from e

    async def _read(self, request: Request) -> Dict[str, Any]:
        content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
        if content_type == "application/json":
            body = await request.body()
            try:
                data = json.loads(body or b"null")
            except ValueError as e:
                raise FormDecodeError(f"Invalid JSON body: {e}") from e
            if not isinstance(data, dict):
                raise FormDecodeError("JSON body must be an object")
            return data
        try:
            form = await request.form()
        except MultiPartException as e:
            raise FormDecodeError(f"Invalid form body: {e.message}") from e
        # Uploads are never credentials.
        return {k: v for k, v in form.items() if isinstance(v, str)}
