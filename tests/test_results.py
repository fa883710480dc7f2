"""Results JSON decoder: rows, terms, ASK and malformed documents."""

import io
import json

from rdflib import XSD
from rdflib.term import BNode, Literal, URIRef

from sparql_repo.result import DecodeError
from sparql_repo.sparql.results import ResultSet, decode_results, decode_term, parse_results

from conftest import BrokenBody


def _stream(doc) -> io.BytesIO:
    return io.BytesIO(json.dumps(doc).encode("utf-8"))


SPO = {
    "head": {"vars": ["s", "p", "o"]},
    "results": {
        "bindings": [
            {
                "s": {"type": "uri", "value": "http://a"},
                "p": {"type": "uri", "value": "http://b"},
                "o": {"type": "literal", "value": "c"},
            }
        ]
    },
}


def test_single_row_round_trip():
    result = decode_results(_stream(SPO))
    assert result.ok
    rs = result.data
    assert rs.variables == ["s", "p", "o"]
    assert len(rs) == 1
    assert rs.rows[0] == {"s": URIRef("http://a"), "p": URIRef("http://b"), "o": Literal("c")}
    assert list(rs.rows[0]) == ["s", "p", "o"]


def test_unbound_optional_variable_is_absent():
    doc = json.loads(json.dumps(SPO))
    del doc["results"]["bindings"][0]["o"]
    rs = decode_results(_stream(doc)).data
    assert "o" not in rs.rows[0]
    assert rs.rows[0]["s"] == URIRef("http://a")


def test_rows_keep_server_order():
    doc = {
        "head": {"vars": ["n"]},
        "results": {"bindings": [{"n": {"type": "literal", "value": v}} for v in ("3", "1", "2")]},
    }
    rs = decode_results(_stream(doc)).data
    assert [str(row["n"]) for row in rs] == ["3", "1", "2"]


def test_column_view_skips_unbound():
    doc = {
        "head": {"vars": ["x", "y"]},
        "results": {
            "bindings": [
                {"x": {"type": "uri", "value": "http://x1"}},
                {"x": {"type": "uri", "value": "http://x2"}, "y": {"type": "literal", "value": "y2"}},
            ]
        },
    }
    columns = decode_results(_stream(doc)).data.bindings()
    assert columns == {"x": [URIRef("http://x1"), URIRef("http://x2")], "y": [Literal("y2")]}


def test_head_links_are_kept():
    doc = {"head": {"vars": [], "link": ["http://meta.example.org/"]}, "results": {"bindings": []}}
    assert decode_results(_stream(doc)).data.links == ["http://meta.example.org/"]


def test_ask_response():
    rs = decode_results(_stream({"head": {}, "boolean": True})).data
    assert rs.boolean is True
    assert rs.rows == []


# ── terms ─────────────────────────────────────────────────────

def test_language_tagged_literal():
    term = decode_term({"type": "literal", "value": "chat", "xml:lang": "fr"}).data
    assert term == Literal("chat", lang="fr")


def test_typed_literal():
    term = decode_term({"type": "literal", "value": "42", "datatype": str(XSD.integer)}).data
    assert term == Literal("42", datatype=XSD.integer)


def test_sparql10_typed_literal_type():
    term = decode_term({"type": "typed-literal", "value": "1.5", "datatype": str(XSD.decimal)}).data
    assert term.datatype == XSD.decimal


def test_language_wins_over_lang_string_datatype():
    desc = {
        "type": "literal",
        "value": "hello",
        "xml:lang": "en",
        "datatype": "http://www.w3.org/1999/02/22-rdf-syntax-ns#langString",
    }
    assert decode_term(desc).data == Literal("hello", lang="en")


def test_blank_node():
    assert decode_term({"type": "bnode", "value": "b0"}).data == BNode("b0")


def test_unknown_term_type_fails():
    assert not decode_term({"type": "triple", "value": "x"}).ok


def test_term_without_value_fails():
    assert not decode_term({"type": "uri"}).ok


# ── failures ──────────────────────────────────────────────────

def test_truncated_json_is_decode_error():
    result = decode_results(io.BytesIO(b'{"head": {"vars": ["s"]}, "results": {"bind'))
    assert isinstance(result, DecodeError)
    assert isinstance(result.context, json.JSONDecodeError)


def test_missing_head_is_decode_error():
    assert isinstance(parse_results({"results": {"bindings": []}}), DecodeError)


def test_missing_results_is_decode_error():
    assert isinstance(parse_results({"head": {"vars": ["s"]}}), DecodeError)


def test_garbage_term_fails_whole_decode():
    doc = json.loads(json.dumps(SPO))
    doc["results"]["bindings"].append({"s": {"type": "uri"}})
    result = decode_results(_stream(doc))
    assert isinstance(result, DecodeError)
    assert "row 1" in result.error


def test_undeclared_variable_fails():
    doc = json.loads(json.dumps(SPO))
    doc["results"]["bindings"][0]["z"] = {"type": "uri", "value": "http://z"}
    assert isinstance(decode_results(_stream(doc)), DecodeError)


def test_body_read_failure_is_decode_error():
    result = decode_results(BrokenBody())
    assert isinstance(result, DecodeError)
    assert isinstance(result.context, ConnectionResetError)


def test_result_set_is_plain_data():
    rs = ResultSet(variables=["a"])
    assert rs.rows == [] and rs.boolean is None
