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

"""Decoder for CONSTRUCT / DESCRIBE responses.

Buffers the whole body, hands it to the rdflib parser registered for the
declared media type and returns every statement as a list. Parser errors
come back unchanged inside a DecodeError.
"""

from __future__ import annotations

import json
from typing import Any, BinaryIO, NamedTuple

from rdflib import Dataset, Graph
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID
from rdflib.plugins.stores.memory import Memory
from rdflib.term import BNode, Node, URIRef

from sparql_repo.logger import get_logger
from sparql_repo.result import DecodeError, Fail, Ok, Result
from sparql_repo.sparql.results import decode_term
from sparql_repo.transport import read_body

log = get_logger(__name__)

# ── Media types ───────────────────────────────────────────────

TURTLE = "text/turtle"
N_QUADS = "application/n-quads"
RDF_XML = "application/rdf+xml"
TRIX = "application/trix"
TRIG = "application/x-trig"
N3 = "text/rdf+n3"
RDF_JSON = "application/rdf+json"
BINARY_RDF = "application/x-binary-rdf"
N_TRIPLES = "text/plain"

CONSTRUCT_FORMATS = frozenset({
    TURTLE, N_QUADS, RDF_XML, TRIX, TRIG, N3, RDF_JSON, BINARY_RDF, N_TRIPLES,
})

_TRIPLE_PARSERS = {
    TURTLE: "turtle",
    RDF_XML: "xml",
    N3: "n3",
    N_TRIPLES: "nt",
}

_QUAD_PARSERS = {
    N_QUADS: "nquads",
    TRIG: "trig",
    TRIX: "trix",
}


class Triple(NamedTuple):
    subject: Node
    predicate: Node
    object: Node


class Quad(NamedTuple):
    """A statement in a named graph; `graph` is None for the default graph."""

    subject: Node
    predicate: Node
    object: Node
    graph: Node | None


Statement = Triple | Quad


def _fail(media_type: str, message: str, context: Any = None) -> DecodeError:
    return DecodeError(error=f"Could not decode {media_type} response: {message}", context=context, media_type=media_type)


# ── RDF/JSON ──────────────────────────────────────────────────

def _resource(key: str) -> Node:
    return BNode(key[2:]) if key.startswith("_:") else URIRef(key)


def parse_rdf_json(data: bytes) -> Result[list[Triple]]:
    """Decode an RDF/JSON document ({subject: {predicate: [object, ...]}})."""
    try:
        raw = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return Fail(error=str(exc), context=exc)
    if not isinstance(raw, dict):
        return Fail(error="top level is not an object")

    triples: list[Triple] = []
    for subject, predicates in raw.items():
        if not isinstance(predicates, dict):
            return Fail(error=f"predicates of {subject!r} are not an object")
        for predicate, objects in predicates.items():
            if not isinstance(objects, list):
                return Fail(error=f"objects of {subject!r} {predicate!r} are not a list")
            for desc in objects:
                term = decode_term(desc)
                if not term.ok:
                    return Fail(error=f"{subject!r} {predicate!r}: {term.error}", context=term.context)
                triples.append(Triple(_resource(subject), URIRef(predicate), term.data))
    return Ok(data=triples)


# ── Decoder ────────────────────────────────────────────────────

def _graph_name(graph: Any) -> Node | None:
    name = getattr(graph, "identifier", graph)
    return None if name is None or name == DATASET_DEFAULT_GRAPH_ID else name


class _RecordingStore(Memory):
    """Memory store that also keeps every added statement in parse order.

    Iterating a Graph gives index order and merges repeats; callers get
    exactly what the body said, in the order it said it.
    """

    def __init__(self) -> None:
        super().__init__()
        self.statements: list[tuple[Node, Node, Node, Node | None]] = []

    def add(self, triple, context, quoted=False):
        if not quoted:
            s, p, o = triple
            self.statements.append((s, p, o, _graph_name(context)))
        super().add(triple, context, quoted)


def _parse_with_rdflib(data: bytes, media_type: str) -> list[Statement]:
    store = _RecordingStore()
    if media_type in _QUAD_PARSERS:
        Dataset(store=store).parse(data=data, format=_QUAD_PARSERS[media_type])
        return [Quad(*statement) for statement in store.statements]

    Graph(store=store).parse(data=data, format=_TRIPLE_PARSERS[media_type])
    return [Triple(s, p, o) for s, p, o, _ in store.statements]


def decode_statements(data: bytes, media_type: str) -> Result[list[Statement]]:
    """Decode an already-buffered body in the given serialization."""
    if media_type == RDF_JSON:
        parsed = parse_rdf_json(data)
        if not parsed.ok:
            return _fail(media_type, parsed.error, parsed.context)
        return Ok(data=list(parsed.data))

    if media_type not in _TRIPLE_PARSERS and media_type not in _QUAD_PARSERS:
        return _fail(media_type, "no RDF codec for this media type")

    try:
        statements = _parse_with_rdflib(data, media_type)
    except Exception as exc:
        return _fail(media_type, f"{type(exc).__name__}: {exc}", exc)

    return Ok(data=statements)


def decode_triples(stream: BinaryIO, media_type: str = TURTLE) -> Result[list[Statement]]:
    """Buffer the body from `stream` and decode every statement in it."""
    body = read_body(stream)
    if not body.ok:
        return DecodeError(error=body.error, context=body.context, media_type=media_type)

    result = decode_statements(body.data, media_type)
    if result.ok:
        log.info("Decoded %d statements from %s", len(result.data), media_type)
    return result
