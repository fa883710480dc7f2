# SPDX-License-Identifier: MIT
#
#  █████╗ ██████╗  █████╗ ███████╗
# ██╔══██╗██╔══██╗██╔══██╗██╔════╝
# ███████║██████╔╝███████║███████╗
# ██╔══██║██╔══██╗██╔══██║╚════██║
# ██║  ██║██║  ██║██║  ██║███████║
# ╚═╝  ╚═╝╚═╝  ╚═╝╚═╝  ╚═╝╚══════╝
# Copyright (C) 2026 Riza Emre ARAS <r.emrearas@proton.me>
#
# Licensed under the MIT License.
# See LICENSE and THIRD_PARTY_LICENSES for details.

"""HTTP executor capability and its default urllib implementation.

The repository never opens sockets itself. It hands an encoded request to
an executor and gets back a status, headers and an open body stream, or a
TransportError when no response arrived at all. Each repository owns its
own executor; there is no process-wide default client.
"""

from __future__ import annotations

import http.client
import io
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from typing import BinaryIO, Protocol

import certifi

from sparql_repo.config import AuthConfig
from sparql_repo.logger import get_logger
from sparql_repo.result import Fail, Ok, Result, TransportError

log = get_logger(__name__)

_ssl_ctx = ssl.create_default_context(cafile=certifi.where())

_READ_ERRORS = (OSError, http.client.HTTPException)


@dataclass(slots=True)
class HttpResponse:
    """Status line, headers and the still-open body of one response."""

    status: int
    reason: str
    headers: Mapping[str, str]
    body: BinaryIO

    def close(self) -> None:
        self.body.close()


class HttpExecutor(Protocol):
    def send(
        self,
        method: str,
        url: str,
        body: bytes,
        headers: Mapping[str, str],
    ) -> Result[HttpResponse]: ...


def read_body(stream: BinaryIO, limit: int | None = None) -> Result[bytes]:
    """Read a response body (at most `limit` bytes) without raising."""
    try:
        data = stream.read() if limit is None else stream.read(limit)
    except _READ_ERRORS as exc:
        return Fail(error=f"Failed to read response body: {exc}", context=exc)
    return Ok(data=data or b"")


class UrllibExecutor:
    """Blocking executor on urllib with a certifi trust store.

    Non-2xx answers come back as responses, not failures: urllib's
    HTTPError is itself a readable response and status classification
    belongs to the caller.

    urllib's digest handler keeps a retry counter and nonce count on
    itself, so with credentials configured each call gets its own opener
    (the password manager is shared, it is read-only after setup).
    """

    def __init__(
        self,
        timeout: float = 30.0,
        auth: AuthConfig | None = None,
        auth_scope: str | None = None,
    ) -> None:
        self._timeout = timeout
        self._passwords: urllib.request.HTTPPasswordMgr | None = None
        if auth is not None:
            self._passwords = urllib.request.HTTPPasswordMgrWithDefaultRealm()
            self._passwords.add_password(None, auth_scope or "/", auth.username, auth.password)
        self._opener = self._build_opener() if self._passwords is None else None

    def _build_opener(self) -> urllib.request.OpenerDirector:
        handlers: list[urllib.request.BaseHandler] = [
            urllib.request.HTTPSHandler(context=_ssl_ctx),
        ]
        if self._passwords is not None:
            handlers.append(urllib.request.HTTPDigestAuthHandler(self._passwords))
        return urllib.request.build_opener(*handlers)

    @property
    def timeout(self) -> float:
        return self._timeout

    def send(
        self,
        method: str,
        url: str,
        body: bytes,
        headers: Mapping[str, str],
    ) -> Result[HttpResponse]:
        req = urllib.request.Request(
            url,
            data=body or None,
            headers=dict(headers),
            method=method,
        )

        try:
            opener = self._opener or self._build_opener()
            resp = opener.open(req, timeout=self._timeout)
        except urllib.error.HTTPError as exc:
            stream = exc if exc.fp is not None else io.BytesIO()
            return Ok(data=HttpResponse(exc.code, str(exc.reason), exc.headers, stream))
        except urllib.error.URLError as exc:
            return TransportError(error=f"SPARQL connection error: {exc.reason}", context=exc, url=url)
        except TimeoutError as exc:
            return TransportError(error=f"SPARQL timeout after {self._timeout}s", context=exc, url=url)
        except _READ_ERRORS as exc:
            return TransportError(error=f"SPARQL transport error: {exc}", context=exc, url=url)

        return Ok(data=HttpResponse(resp.status, resp.reason, resp.headers, resp))
