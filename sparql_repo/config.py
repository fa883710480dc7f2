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

"""Repository configuration: one validated value object per endpoint.

Built from a plain mapping (`build_config`) or from the `repository:`
section of a YAML file (`load_config`). Validation happens here, once,
so a Repository never sees an unknown dialect or a relative endpoint.
"""

from __future__ import annotations

import urllib.parse
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from sparql_repo.result import Fail, Ok, Result
from sparql_repo.sparql.dialect import Dialect

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """Digest authentication credentials."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"AuthConfig(username={self.username!r}, password='***')"


@dataclass(frozen=True, slots=True)
class RepositoryConfig:
    endpoint: str
    dialect: Dialect
    timeout: float = DEFAULT_TIMEOUT
    auth: AuthConfig | None = None


# ── Validation ─────────────────────────────────────────────────

def _check_endpoint(endpoint: Any) -> Result[str]:
    if not isinstance(endpoint, str) or not endpoint.strip():
        return Fail(error="Config error: 'endpoint' must be a non-empty string")
    parts = urllib.parse.urlsplit(endpoint.strip())
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return Fail(error=f"Config error: endpoint is not an absolute http(s) URL: {endpoint}")
    return Ok(data=endpoint.strip())


def _check_timeout(timeout: Any) -> Result[float]:
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        return Fail(error=f"Config error: 'timeout' must be a positive number, got {timeout!r}")
    return Ok(data=float(timeout))


def _check_auth(raw: Any) -> Result[AuthConfig | None]:
    if raw is None:
        return Ok(data=None)
    if not isinstance(raw, dict):
        return Fail(error="Config error: 'auth' must be a mapping")
    username, password = raw.get("username"), raw.get("password")
    if not isinstance(username, str) or not isinstance(password, str) or not username:
        return Fail(error="Config error: 'auth' needs both 'username' and 'password'")
    return Ok(data=AuthConfig(username=username, password=password))


def build_config(raw: dict[str, Any]) -> Result[RepositoryConfig]:
    """Validate a plain mapping into a RepositoryConfig."""
    if not isinstance(raw, dict):
        return Fail(error="Config error: repository section must be a mapping")

    endpoint = _check_endpoint(raw.get("endpoint"))
    if not endpoint.ok:
        return endpoint  # type: ignore[return-value]

    if "dialect" not in raw:
        return Fail(error="Config error: 'dialect' is required")
    dialect = Dialect.parse(raw["dialect"])
    if not dialect.ok:
        return dialect  # type: ignore[return-value]

    timeout = _check_timeout(raw.get("timeout", DEFAULT_TIMEOUT))
    if not timeout.ok:
        return timeout  # type: ignore[return-value]

    auth = _check_auth(raw.get("auth"))
    if not auth.ok:
        return auth  # type: ignore[return-value]

    return Ok(data=RepositoryConfig(
        endpoint=endpoint.data,
        dialect=dialect.data,
        timeout=timeout.data,
        auth=auth.data,
    ))


# ── Loader ─────────────────────────────────────────────────────

def load_config(path: Path) -> Result[RepositoryConfig]:
    """Load the `repository:` section of a YAML file."""
    if not path.exists():
        return Fail(error=f"Config file not found: {path}")

    try:
        raw: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        return Fail(error=f"YAML parse error: {exc}", context=str(path))

    if not isinstance(raw, dict) or "repository" not in raw:
        return Fail(error="Config structure error: missing 'repository' section", context=str(path))

    return build_config(raw["repository"])
