"""Triple decoder: rdflib-backed formats, RDF/JSON and codec failures."""

import io
import json

from rdflib.term import BNode, Literal, URIRef

from sparql_repo.result import DecodeError
from sparql_repo.sparql.triples import (
    BINARY_RDF,
    N_QUADS,
    N_TRIPLES,
    RDF_JSON,
    RDF_XML,
    TRIG,
    TURTLE,
    Quad,
    Triple,
    decode_statements,
    decode_triples,
)

from conftest import BrokenBody

A, B, C = URIRef("http://ex.org/a"), URIRef("http://ex.org/b"), URIRef("http://ex.org/c")
G = URIRef("http://ex.org/g")

TURTLE_DOC = b"""
@prefix ex: <http://ex.org/> .
ex:a ex:b ex:c ;
     ex:b "label"@en .
"""


def test_turtle_decodes_every_triple():
    result = decode_triples(io.BytesIO(TURTLE_DOC), TURTLE)
    assert result.ok
    assert isinstance(result.data, list)
    assert set(result.data) == {Triple(A, B, C), Triple(A, B, Literal("label", lang="en"))}
    assert all(isinstance(t, Triple) for t in result.data)


def test_ntriples_as_text_plain():
    doc = b"<http://ex.org/a> <http://ex.org/b> <http://ex.org/c> .\n"
    assert decode_triples(io.BytesIO(doc), N_TRIPLES).data == [Triple(A, B, C)]


def test_rdf_xml():
    doc = b"""<?xml version="1.0"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#" xmlns:ex="http://ex.org/">
  <rdf:Description rdf:about="http://ex.org/a"><ex:b rdf:resource="http://ex.org/c"/></rdf:Description>
</rdf:RDF>"""
    assert decode_statements(doc, RDF_XML).data == [Triple(A, B, C)]


def test_nquads_keep_graph_names():
    doc = (
        b"<http://ex.org/a> <http://ex.org/b> <http://ex.org/c> <http://ex.org/g> .\n"
        b"<http://ex.org/a> <http://ex.org/b> \"d\" .\n"
    )
    result = decode_statements(doc, N_QUADS)
    assert set(result.data) == {Quad(A, B, C, G), Quad(A, B, Literal("d"), None)}


def test_trig_named_graph():
    doc = b"@prefix ex: <http://ex.org/> .\nex:g { ex:a ex:b ex:c . }\n"
    assert decode_statements(doc, TRIG).data == [Quad(A, B, C, G)]


def test_rdf_json_keeps_document_order():
    doc = {
        "http://ex.org/a": {
            "http://ex.org/b": [
                {"type": "uri", "value": "http://ex.org/c"},
                {"type": "literal", "value": "chat", "lang": "fr"},
            ]
        },
        "_:n1": {"http://ex.org/b": [{"type": "bnode", "value": "_:n2"}]},
    }
    result = decode_statements(json.dumps(doc).encode("utf-8"), RDF_JSON)
    assert result.data == [
        Triple(A, B, C),
        Triple(A, B, Literal("chat", lang="fr")),
        Triple(BNode("n1"), B, BNode("n2")),
    ]


def test_rdf_json_bad_object_fails():
    doc = {"http://ex.org/a": {"http://ex.org/b": [{"type": "literal"}]}}
    assert isinstance(decode_statements(json.dumps(doc).encode("utf-8"), RDF_JSON), DecodeError)


def test_binary_rdf_has_no_codec():
    result = decode_statements(b"\x00\x01", BINARY_RDF)
    assert isinstance(result, DecodeError)
    assert result.media_type == BINARY_RDF


def test_unknown_media_type_fails():
    assert isinstance(decode_statements(b"", "application/ld+json"), DecodeError)


def test_broken_turtle_surfaces_parser_error():
    result = decode_triples(io.BytesIO(b"<http://ex.org/a> <http://ex.org/b> ."), TURTLE)
    assert isinstance(result, DecodeError)
    assert isinstance(result.context, Exception)
    assert result.media_type == TURTLE


def test_body_read_failure_is_decode_error():
    assert isinstance(decode_triples(BrokenBody(), TURTLE), DecodeError)


def test_empty_body_is_empty_graph():
    assert decode_triples(io.BytesIO(b""), TURTLE).data == []


def test_turtle_keeps_body_order_and_repeats():
    doc = (
        b"<http://ex.org/z> <http://ex.org/p> <http://ex.org/o1> .\n"
        b"<http://ex.org/a> <http://ex.org/p> <http://ex.org/o2> .\n"
        b"<http://ex.org/z> <http://ex.org/p> <http://ex.org/o1> .\n"
        b"<http://ex.org/m> <http://ex.org/p> <http://ex.org/o3> .\n"
    )
    result = decode_statements(doc, TURTLE)
    assert [str(t.subject) for t in result.data] == [
        "http://ex.org/z",
        "http://ex.org/a",
        "http://ex.org/z",
        "http://ex.org/m",
    ]
    assert result.data[0] == result.data[2]


def test_nquads_keep_body_order_and_repeats():
    doc = (
        b"<http://ex.org/z> <http://ex.org/p> \"1\" <http://ex.org/g> .\n"
        b"<http://ex.org/a> <http://ex.org/p> \"2\" .\n"
        b"<http://ex.org/z> <http://ex.org/p> \"1\" <http://ex.org/g> .\n"
    )
    P = URIRef("http://ex.org/p")
    result = decode_statements(doc, N_QUADS)
    assert result.data == [
        Quad(URIRef("http://ex.org/z"), P, Literal("1"), G),
        Quad(URIRef("http://ex.org/a"), P, Literal("2"), None),
        Quad(URIRef("http://ex.org/z"), P, Literal("1"), G),
    ]
