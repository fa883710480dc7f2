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

"""Result pattern for error handling without exceptions.

Every fallible operation returns Result[T] = Ok[T] | Fail. The Fail
subclasses below tag the failure so callers can tell a dead connection
from a server-side rejection from a body that would not parse.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result carrying typed data."""

    data: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True, slots=True)
class Fail:
    """Failed result carrying error message and optional context."""

    error: str
    context: Any = None
    ok: bool = field(default=False, init=False)


# ── Classified failures ───────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TransportError(Fail):
    """The HTTP round trip never produced a response (DNS, refused, TLS, timeout)."""

    url: str = ""


@dataclass(frozen=True, slots=True)
class StatusError(Fail):
    """The server answered outside the accepted status window."""

    status: int = 0
    reason: str = ""
    body: str | None = None
    body_unreadable: bool = False


@dataclass(frozen=True, slots=True)
class DecodeError(Fail):
    """Success status, but the body could not be read or parsed.

    `context` holds the underlying parser exception when there is one.
    """

    media_type: str = ""


@dataclass(frozen=True, slots=True)
class UnsupportedDialect(Fail):
    """Configuration names a backend dialect this client cannot encode for."""

    name: str = ""


@dataclass(frozen=True, slots=True)
class UnsupportedFormat(Fail):
    """A construct request asked for a media type outside the known RDF formats."""

    media_type: str = ""


Result = Ok[T] | Fail
