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

"""Backend dialects: how a query or update is packed into an HTTP request.

Encoding is pure. Nothing here touches the network, so every dialect can
be checked byte for byte without a live store.

Read/write classification is a case-sensitive substring scan for INSERT
or DELETE. A SELECT that mentions either word inside a string literal,
a comment or an IRI (e.g. ex:INSERT) is classified as a write.
"""

from __future__ import annotations

import urllib.parse
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from sparql_repo.result import Ok, Result, UnsupportedDialect

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

_UPDATE_KEYWORDS = ("INSERT", "DELETE")


class Dialect(str, Enum):
    """Request-shape rules of a backend family."""

    SPARQL = "sparql"
    ONTOTEXT = "ontotext"
    ORACLE = "oracle"

    @classmethod
    def parse(cls, name: str) -> Result[Dialect]:
        """Look up a dialect by name, case-insensitively."""
        key = name.strip().lower() if isinstance(name, str) else ""
        for dialect in cls:
            if dialect.value == key:
                return Ok(data=dialect)
        return UnsupportedDialect(error=f"Unsupported dialect: {name!r}", name=str(name))


class Purpose(str, Enum):
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True, slots=True)
class EncodedRequest:
    """Everything the HTTP executor needs to send one request."""

    method: str
    url: str
    body: bytes
    headers: dict[str, str]


def classify(query: str) -> Purpose:
    """Guess whether a query is an update by scanning for update keywords."""
    if any(keyword in query for keyword in _UPDATE_KEYWORDS):
        return Purpose.WRITE
    return Purpose.READ


def _form(fields: dict[str, str]) -> bytes:
    return urllib.parse.urlencode(fields).encode("utf-8")


def _post(endpoint: str, body: bytes, accept: str) -> EncodedRequest:
    return EncodedRequest(
        method="POST",
        url=endpoint,
        body=body,
        headers={
            "Accept": accept,
            "Content-Type": FORM_CONTENT_TYPE,
            "Content-Length": str(len(body)),
        },
    )


def _with_query_string(endpoint: str, fields: dict[str, str]) -> str:
    separator = "&" if urllib.parse.urlsplit(endpoint).query else "?"
    return f"{endpoint}{separator}{urllib.parse.urlencode(fields)}"


# ── Per-dialect encoders ──────────────────────────────────────


def _encode_sparql(query: str, purpose: Purpose, accept: str, endpoint: str) -> EncodedRequest:
    # Same shape for reads and writes.
    return _post(endpoint, _form({"query": query}), accept)


def _encode_ontotext(query: str, purpose: Purpose, accept: str, endpoint: str) -> EncodedRequest:
    if purpose is Purpose.WRITE:
        return _post(endpoint, _form({"update": query}), accept)
    return EncodedRequest(
        method="GET",
        url=_with_query_string(endpoint, {"query": query}),
        body=b"",
        headers={"Accept": accept},
    )


def _encode_oracle(query: str, purpose: Purpose, accept: str, endpoint: str) -> EncodedRequest:
    if purpose is Purpose.WRITE:
        return _post(endpoint, _form({"request": query}), accept)
    return _post(endpoint, _form({"query": query, "format": accept}), accept)


_ENCODERS: dict[Dialect, Callable[[str, Purpose, str, str], EncodedRequest]] = {
    Dialect.SPARQL: _encode_sparql,
    Dialect.ONTOTEXT: _encode_ontotext,
    Dialect.ORACLE: _encode_oracle,
}


def encode(
    query: str,
    accept: str,
    dialect: Dialect,
    endpoint: str,
    purpose: Purpose | None = None,
) -> Result[EncodedRequest]:
    """Build the HTTP request for `query` under the rules of `dialect`.

    Args:
        query: Opaque SPARQL query or update text.
        accept: Media type placed in the Accept header (and, for the
            oracle dialect, in the `format` field of reads).
        dialect: Target backend dialect.
        endpoint: Absolute URL of the SPARQL endpoint.
        purpose: Read or write; classified from the text when omitted.
    """
    encoder = _ENCODERS.get(dialect) if isinstance(dialect, Dialect) else None
    if encoder is None:
        return UnsupportedDialect(error=f"Unsupported dialect: {dialect!r}", name=str(dialect))

    if purpose is None:
        purpose = classify(query)
    return Ok(data=encoder(query, purpose, accept, endpoint))
