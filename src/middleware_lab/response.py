"""FlowResponse: mutable view over an endpoint response for the response phase."""

from __future__ import annotations

import json
from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.responses import Response


def _is_json(response: Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return content_type.startswith("application/json")


class FlowResponse:
    """Wraps a rendered response so components can edit its JSON payload.

    The body is decoded once; ``finalize`` re-renders it only when a
    component assigned a new payload.
    """

    def __init__(self, response: Response) -> None:
        self.raw = response
        self._payload: Any = None
        self._dirty = False
        body = getattr(response, "body", None)
        if body and _is_json(response):
            try:
                self._payload = json.loads(body)
            except ValueError:
                self._payload = None

    @property
    def status_code(self) -> int:
        return self.raw.status_code

    @property
    def headers(self) -> MutableHeaders:
        return self.raw.headers

    @property
    def payload(self) -> Any:
        return self._payload

    @payload.setter
    def payload(self, value: Any) -> None:
        self._payload = value
        self._dirty = True

    @property
    def is_json_object(self) -> bool:
        return isinstance(self._payload, dict)

    def update(self, **fields: Any) -> None:
        """Merge fields into a JSON object payload; ignored for other bodies."""
        if self.is_json_object:
            self.payload = {**self._payload, **fields}

    def set_cookie(self, key: str, value: str = "", **options: Any) -> None:
        self.raw.set_cookie(key, value, **options)

    def delete_cookie(self, key: str, path: str = "/") -> None:
        self.raw.delete_cookie(key, path=path)

    def finalize(self) -> Response:
        if self._dirty:
            body = json.dumps(
                self._payload,
                ensure_ascii=False,
                allow_nan=False,
                indent=None,
                separators=(",", ":"),
            ).encode("utf-8")
            self.raw.body = body
            self.raw.headers["content-length"] = str(len(body))
            self._dirty = False
        return self.raw
