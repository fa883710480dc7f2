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
"""SPARQL protocol client for RDF triple stores.

Encodes queries per backend dialect, sends them through a pluggable HTTP
executor and decodes results JSON or RDF serializations.
"""

from sparql_repo.config import AuthConfig, RepositoryConfig, build_config, load_config
from sparql_repo.repository import Repository, connect, open_repository
from sparql_repo.result import (
    DecodeError,
    Fail,
    Ok,
    Result,
    StatusError,
    TransportError,
    UnsupportedDialect,
    UnsupportedFormat,
)
from sparql_repo.sparql.dialect import Dialect, EncodedRequest, Purpose, classify, encode
from sparql_repo.sparql.results import ResultSet, decode_results
from sparql_repo.sparql.triples import Quad, Triple, decode_triples
from sparql_repo.transport import HttpExecutor, HttpResponse, UrllibExecutor

__version__ = "0.1.0"

__all__ = [
    "AuthConfig",
    "DecodeError",
    "Dialect",
    "EncodedRequest",
    "Fail",
    "HttpExecutor",
    "HttpResponse",
    "Ok",
    "Purpose",
    "Quad",
    "Repository",
    "RepositoryConfig",
    "Result",
    "ResultSet",
    "StatusError",
    "TransportError",
    "Triple",
    "UnsupportedDialect",
    "UnsupportedFormat",
    "UrllibExecutor",
    "build_config",
    "classify",
    "connect",
    "decode_results",
    "decode_triples",
    "encode",
    "load_config",
    "open_repository",
]
