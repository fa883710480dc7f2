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

"""Repository handle: encode, send, classify, decode.

A Repository is built once per endpoint and shared freely. It holds only
immutable configuration and its own executor, so concurrent callers never
step on each other. Every call owns its response and closes the body
before returning, whatever the outcome.

Accepted status windows differ by call: SELECT/ASK accept exactly 200,
CONSTRUCT accepts 200-205.
"""

from __future__ import annotations

from collections.abc import Callable, Container
from typing import BinaryIO, TypeVar

from sparql_repo.config import RepositoryConfig, build_config
from sparql_repo.logger import get_logger
from sparql_repo.result import (
    DecodeError,
    Ok,
    Result,
    StatusError,
    UnsupportedDialect,
    UnsupportedFormat,
)
from sparql_repo.sparql.dialect import Dialect, EncodedRequest, Purpose, encode
from sparql_repo.sparql.results import RESULTS_JSON, ResultSet, decode_results
from sparql_repo.sparql.triples import CONSTRUCT_FORMATS, TURTLE, Statement, decode_triples
from sparql_repo.transport import HttpExecutor, HttpResponse, UrllibExecutor, read_body

log = get_logger(__name__)

X = TypeVar("X")

QUERY_OK_STATUS: Container[int] = frozenset({200})
CONSTRUCT_OK_STATUS: Container[int] = range(200, 206)

_ERROR_BODY_LIMIT = 8 * 1024


def _status_error(operation: str, resp: HttpResponse) -> StatusError:
    """Describe a rejected response, quoting its body when there is one."""
    status_line = f"{resp.status} {resp.reason}".strip()
    message = f"{operation}: SPARQL request failed: {status_line}"

    body = read_body(resp.body, limit=_ERROR_BODY_LIMIT)
    if not body.ok:
        return StatusError(
            error=f"{message}. Failed to read response body",
            context=body.context,
            status=resp.status,
            reason=resp.reason,
            body_unreadable=True,
        )

    text = body.data.decode("utf-8", errors="replace").strip()
    if not text:
        return StatusError(error=message, status=resp.status, reason=resp.reason)
    return StatusError(
        error=f"{message}. Response body:\n{text}",
        status=resp.status,
        reason=resp.reason,
        body=text,
    )


def _read_text(stream: BinaryIO, media_type: str) -> Result[str]:
    body = read_body(stream)
    if not body.ok:
        return DecodeError(error=body.error, context=body.context, media_type=media_type)
    return Ok(data=body.data.decode("utf-8", errors="replace"))


class Repository:
    """An RDF store reachable over the SPARQL protocol."""

    def __init__(self, config: RepositoryConfig, executor: HttpExecutor) -> None:
        self._config = config
        self._executor = executor

    @property
    def endpoint(self) -> str:
        return self._config.endpoint

    @property
    def dialect(self) -> Dialect:
        return self._config.dialect

    def __repr__(self) -> str:
        return f"Repository(endpoint={self.endpoint!r}, dialect={self.dialect.value!r})"

    def _execute(
        self,
        operation: str,
        request: EncodedRequest,
        accepted: Container[int],
        decode: Callable[[BinaryIO], Result[X]],
    ) -> Result[X]:
        """Send one request and route the body to `decode` on success."""
        log.info("SPARQL %s %s → %s (%d bytes)", operation, request.method, request.url, len(request.body))

        sent = self._executor.send(request.method, request.url, request.body, request.headers)
        if not sent.ok:
            log.warning("%s transport failure: %s", operation, sent.error)
            return sent  # type: ignore[return-value]

        resp: HttpResponse = sent.data
        try:
            if resp.status not in accepted:
                failure = _status_error(operation, resp)
                log.warning("%s", failure.error)
                return failure

            result = decode(resp.body)
            if not result.ok:
                log.warning("%s decode failure: %s", operation, result.error)
            return result
        finally:
            resp.close()

    def _encode(self, query: str, accept: str, purpose: Purpose | None = None) -> Result[EncodedRequest]:
        encoded = encode(query, accept, self._config.dialect, self._config.endpoint, purpose)
        if encoded.ok:
            log.debug("Encoded %s request for dialect %s", encoded.data.method, self._config.dialect.value)
        return encoded

    def query(self, text: str) -> Result[ResultSet]:
        """Run a SELECT or ASK query and decode the JSON results."""
        encoded = self._encode(text, RESULTS_JSON, Purpose.READ)
        if not encoded.ok:
            return encoded  # type: ignore[return-value]
        return self._execute("Query", encoded.data, QUERY_OK_STATUS, decode_results)

    def construct_format(self, text: str, media_type: str) -> Result[str]:
        """Run a CONSTRUCT (or update) and return the raw response text.

        `media_type` must be one of the RDF serializations in CONSTRUCT_FORMATS.
        """
        if media_type not in CONSTRUCT_FORMATS:
            return UnsupportedFormat(
                error=f"Unsupported construct format: {media_type!r}",
                media_type=media_type,
            )
        encoded = self._encode(text, media_type)
        if not encoded.ok:
            return encoded  # type: ignore[return-value]
        return self._execute(
            "Construct",
            encoded.data,
            CONSTRUCT_OK_STATUS,
            lambda stream: _read_text(stream, media_type),
        )

    def construct(self, text: str) -> Result[list[Statement]]:
        """Run a CONSTRUCT query as Turtle and decode every triple."""
        encoded = self._encode(text, TURTLE)
        if not encoded.ok:
            return encoded  # type: ignore[return-value]
        return self._execute(
            "Construct",
            encoded.data,
            CONSTRUCT_OK_STATUS,
            lambda stream: decode_triples(stream, TURTLE),
        )


def open_repository(config: RepositoryConfig, executor: HttpExecutor | None = None) -> Result[Repository]:
    """Create a Repository, rejecting unknown dialects before any I/O.

    Without an explicit executor a fresh UrllibExecutor is built from the
    config's timeout and credentials.
    """
    if not isinstance(config.dialect, Dialect):
        return UnsupportedDialect(
            error=f"Unsupported dialect: {config.dialect!r}",
            name=str(config.dialect),
        )

    if executor is None:
        executor = UrllibExecutor(
            timeout=config.timeout,
            auth=config.auth,
            auth_scope=config.endpoint,
        )

    log.info("Repository %s (%s)", config.endpoint, config.dialect.value)
    return Ok(data=Repository(config, executor))


def connect(raw: dict, executor: HttpExecutor | None = None) -> Result[Repository]:
    """Validate a plain config mapping and open a Repository from it."""
    config = build_config(raw)
    if not config.ok:
        return config  # type: ignore[return-value]
    return open_repository(config.data, executor)
