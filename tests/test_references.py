from pathlib import Path

from xsd_review_api.references import (
    ReferenceResolver,
    resolve_references,
    unresolved_references,
)
from xsd_review_api.xsd_parser import ParserConfig, find_node_by_path, parse_xsd

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "schema" / "order.xsd"

XS = 'xmlns:xs="http://www.w3.org/2001/XMLSchema"'


def _schema(body):
    return f"<xs:schema {XS}>{body}</xs:schema>"


def test_forward_reference_resolves():
    root = parse_xsd(FIXTURE.read_text(encoding="utf-8"))
    customer_ref = find_node_by_path(
        root, "/element[@name='Order']/complexType/sequence/element[@name='tns:Customer']"
    )
    # the definition appears after the reference in document order
    assert customer_ref.resolved_target_path == "/element[@name='Customer']"

    group_ref = find_node_by_path(
        root, "/element[@name='Order']/complexType/attributeGroup[@name='tns:AuditAttributes']"
    )
    assert group_ref.resolved_target_path == "/attributeGroup[@name='AuditAttributes']"


def test_dangling_reference_is_reported_not_raised():
    root = parse_xsd(FIXTURE.read_text(encoding="utf-8"))
    dangling = unresolved_references(root)
    assert [n.reference_name for n in dangling] == ["cmn:Address"]
    assert dangling[0].resolved_target_path is None


def test_kind_qualified_match_wins_over_bare_name():
    root = parse_xsd(
        _schema(
            "<xs:complexType name='Addr'/>"
            "<xs:element name='Addr'/>"
            "<xs:element name='Holder'><xs:complexType><xs:sequence>"
            "<xs:element ref='Addr'/>"
            "</xs:sequence></xs:complexType></xs:element>"
        )
    )
    ref = next(n for n in root.iter_nodes() if n.is_reference)
    assert ref.resolved_target_path == "/element[@name='Addr']"


def test_bare_name_keeps_first_definition():
    root = parse_xsd(
        _schema(
            "<xs:complexType name='Thing'/>"
            "<xs:element name='Thing'/>"
            "<xs:complexType name='Wrapper'><xs:group ref='Thing'/></xs:complexType>"
        )
    )
    ref = next(n for n in root.iter_nodes() if n.is_reference)
    assert ref.kind == "group"
    # no group named Thing: falls back to the bare key, owned by the first writer
    assert ref.resolved_target_path == "/complexType[@name='Thing']"


def test_references_are_not_indexed_as_definitions():
    text = _schema(
        "<xs:complexType name='T'><xs:sequence>"
        "<xs:element ref='Missing' name='Missing'/>"
        "<xs:element ref='Missing'/>"
        "</xs:sequence></xs:complexType>"
    )
    root = parse_xsd(text)
    resolver = ReferenceResolver()
    index = resolver.build_index(root)
    assert "Missing" not in index
    assert "complexType:T" in index
    assert len(unresolved_references(root)) == 2


def test_resolve_in_place_after_parse():
    text = _schema("<xs:element ref='A'/><xs:element name='A'/>")
    root = parse_xsd(text, ParserConfig(resolve_references=False))
    ref = root.children[0]
    assert ref.resolved_target_path is None

    assert resolve_references(root) is root
    assert ref.resolved_target_path == "/element[@name='A']"


def test_resolver_counts_hits():
    text = _schema(
        "<xs:element ref='p:A'/><xs:element ref='B'/><xs:element name='A'/>"
    )
    root = parse_xsd(text, ParserConfig(resolve_references=False))
    assert ReferenceResolver().resolve(root) == 1


def test_non_reference_nodes_have_no_reference_fields():
    root = parse_xsd(FIXTURE.read_text(encoding="utf-8"))
    bar = find_node_by_path(root, "/complexType[@name='Bar']")
    assert bar.is_reference is False
    assert bar.reference_name is None
    assert bar.resolved_target_path is None
