"""
The raw request contract the sheet client is written against.

A Transport takes a method, a full url and an optional body and hands back
a RawResponse without raising for HTTP failures; parse_response() decodes
the body.  Deciding whether a response is an error is left to the caller.
Authorization is attached from an optional session object with a
headers() method, see sheetrows.access.
"""
import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx
from loguru import logger

from ..errors import SheetError

DEFAULT_TIMEOUT = 60

@dataclass
class RawResponse():
    """What came back from the service, undecoded"""
    ok: bool
    status_code: int
    body: bytes|str = field(default=b"")
    content_type: str = field(default="application/json")

class Transport(ABC):
    """Performs one HTTP request per call"""

    @abstractmethod
    async def raw_request(self, method: str, url: str, body: Any = None) -> RawResponse:
        ...

    async def close(self) -> None:
        pass

def parse_response(raw: RawResponse) -> Any:
    """
    Decode a response body.  JSON comes back as python values, anything else
    as text, and an empty body as an empty dict.
    """
    body = raw.body.decode('utf-8') if isinstance(raw.body, bytes) else str(raw.body or "")
    if not body.strip():
        return {}
    stripped = body.lstrip()
    if 'json' in (raw.content_type or "") or stripped[0] in '{[':
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise SheetError(f"Could not parse response ({raw.status_code}): {e}", body) from e
    return body

class HttpxTransport(Transport):
    """
    Transport over an httpx.AsyncClient.
    session:    optional object whose headers() returns the Authorization
                header, asked fresh on every call so refreshed tokens are used.
    client:     an already configured httpx.AsyncClient, mostly for tests.
    """
    def __init__(self, session: Any = None,
                 timeout: float = DEFAULT_TIMEOUT,
                 client: httpx.AsyncClient|None = None) -> None:
        self._session = session
        self._client = client if client is not None else httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def raw_request(self, method: str, url: str, body: Any = None) -> RawResponse:
        headers = {}
        if self._session is not None:
            # may refresh or run the oauth flow, both blocking
            headers.update(await asyncio.to_thread(self._session.headers))
        content = None
        if body is not None:
            content = body if isinstance(body, (str, bytes)) else json.dumps(body)
            headers["Content-Type"] = "application/json"
        try:
            response = await self._client.request(method, url, content=content, headers=headers)
        except httpx.RequestError as e:
            raise SheetError(f"Network error: {e}") from e
        return RawResponse(ok=response.is_success,
                           status_code=response.status_code,
                           body=response.content,
                           content_type=response.headers.get("content-type", ""))

    async def close(self) -> None:
        logger.debug("closing sheets transport")
        await self._client.aclose()
