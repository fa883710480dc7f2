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

"""Decoder for application/sparql-results+json.

Turns a SELECT or ASK response body into a ResultSet of rdflib terms.
Anything that does not match the SPARQL 1.1 results shape (including a
single broken term descriptor) fails the whole decode; rows are never
dropped silently.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, BinaryIO

from rdflib.term import BNode, Literal, Node, URIRef

from sparql_repo.logger import get_logger
from sparql_repo.result import DecodeError, Fail, Ok, Result
from sparql_repo.transport import read_body

log = get_logger(__name__)

RESULTS_JSON = "application/sparql-results+json"

_LITERAL_TYPES = ("literal", "typed-literal")

Row = dict[str, Node]


@dataclass(frozen=True, slots=True)
class ResultSet:
    """Projection plus solution rows, in server order.

    Unbound variables (OPTIONAL misses) are absent from their row.
    `boolean` is set only for ASK responses.
    """

    variables: list[str]
    rows: list[Row] = field(default_factory=list)
    boolean: bool | None = None
    links: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def bindings(self) -> dict[str, list[Node]]:
        """Column view: each variable mapped to the terms bound to it, row order kept."""
        columns: dict[str, list[Node]] = {var: [] for var in self.variables}
        for row in self.rows:
            for var, term in row.items():
                columns[var].append(term)
        return columns


# ── Terms ──────────────────────────────────────────────────────

def decode_term(desc: Any) -> Result[Node]:
    """Convert one JSON term descriptor ({"type", "value", ...}) to an rdflib term.

    Accepts both the results-JSON `xml:lang` key and the RDF/JSON `lang` key.
    """
    if not isinstance(desc, dict):
        return Fail(error=f"term descriptor is not an object: {desc!r}")

    kind, value = desc.get("type"), desc.get("value")
    if not isinstance(value, str):
        return Fail(error=f"term descriptor has no string 'value': {desc!r}")

    if kind == "uri":
        return Ok(data=URIRef(value))
    if kind == "bnode":
        return Ok(data=BNode(value[2:] if value.startswith("_:") else value))
    if kind not in _LITERAL_TYPES:
        return Fail(error=f"unknown term type {kind!r}")

    lang = desc.get("xml:lang", desc.get("lang"))
    datatype = desc.get("datatype")
    if lang is not None and not isinstance(lang, str):
        return Fail(error=f"literal language tag is not a string: {lang!r}")
    if datatype is not None and not isinstance(datatype, str):
        return Fail(error=f"literal datatype is not a string: {datatype!r}")

    # rdflib refuses lang + datatype; a language tag implies rdf:langString.
    try:
        if lang:
            return Ok(data=Literal(value, lang=lang))
        return Ok(data=Literal(value, datatype=URIRef(datatype) if datatype else None))
    except ValueError as exc:
        return Fail(error=f"invalid literal: {exc}", context=exc)


# ── Decoder ────────────────────────────────────────────────────

def _fail(message: str, context: Any = None) -> DecodeError:
    return DecodeError(error=f"Invalid SPARQL results JSON: {message}", context=context, media_type=RESULTS_JSON)


def _decode_row(binding: Any, variables: list[str]) -> Result[Row]:
    """Decode one solution; keys follow the projection order."""
    if not isinstance(binding, dict):
        return Fail(error=f"binding is not an object: {binding!r}")
    undeclared = binding.keys() - set(variables)
    if undeclared:
        return Fail(error=f"binding for undeclared variable {sorted(undeclared)[0]!r}")
    row: Row = {}
    for var in variables:
        if var not in binding:
            continue
        term = decode_term(binding[var])
        if not term.ok:
            return Fail(error=f"variable {var!r}: {term.error}")
        row[var] = term.data
    return Ok(data=row)


def _decode_head(raw: dict[str, Any]) -> Result[tuple[list[str], list[str]]]:
    head = raw.get("head")
    if not isinstance(head, dict):
        return Fail(error="missing 'head' object")
    variables = head.get("vars", [])
    links = head.get("link", [])
    if not isinstance(variables, list) or not all(isinstance(v, str) for v in variables):
        return Fail(error="'head.vars' must be a list of strings")
    if not isinstance(links, list) or not all(isinstance(v, str) for v in links):
        return Fail(error="'head.link' must be a list of strings")
    return Ok(data=(variables, links))


def parse_results(raw: Any) -> Result[ResultSet]:
    """Decode an already-parsed results JSON document."""
    if not isinstance(raw, dict):
        return _fail("top level is not an object")

    head = _decode_head(raw)
    if not head.ok:
        return _fail(head.error)
    variables, links = head.data

    if "results" not in raw and "boolean" in raw:
        if not isinstance(raw["boolean"], bool):
            return _fail("'boolean' must be true or false")
        return Ok(data=ResultSet(variables=variables, boolean=raw["boolean"], links=links))

    results = raw.get("results")
    if not isinstance(results, dict):
        return _fail("missing 'results' object")
    bindings = results.get("bindings")
    if not isinstance(bindings, list):
        return _fail("'results.bindings' must be a list")

    rows: list[Row] = []
    for index, binding in enumerate(bindings):
        row = _decode_row(binding, variables)
        if not row.ok:
            return _fail(f"row {index}: {row.error}")
        rows.append(row.data)

    return Ok(data=ResultSet(variables=variables, rows=rows, links=links))


def decode_results(stream: BinaryIO) -> Result[ResultSet]:
    """Read a results JSON body from `stream` and decode it."""
    body = read_body(stream)
    if not body.ok:
        return DecodeError(error=body.error, context=body.context, media_type=RESULTS_JSON)

    try:
        raw = json.loads(body.data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return _fail(str(exc), context=exc)

    result = parse_results(raw)
    if result.ok:
        log.info("SPARQL returned %d bindings", len(result.data.rows))
    return result
