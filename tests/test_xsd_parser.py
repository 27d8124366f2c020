from pathlib import Path

import pytest

from xsd_review_api.xsd_parser import (
    ParserConfig,
    XSDParser,
    build_path,
    find_node_by_path,
    flatten_nodes,
    node_kind_label,
    parse_schema,
    parse_xsd,
    search_nodes,
)

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "schema" / "order.xsd"

XS = 'xmlns:xs="http://www.w3.org/2001/XMLSchema"'


def _text():
    return FIXTURE.read_text(encoding="utf-8")


def test_parses_order_tree():
    root = parse_xsd(_text())
    assert root is not None
    assert root.kind == "schema"
    assert root.path == ""
    assert root.name == ""
    assert root.parent_id is None
    assert root.documentation == "Purchase order schema."
    assert [child.kind for child in root.children] == [
        "annotation",
        "import",
        "include",
        "element",
        "complexType",
        "element",
        "attributeGroup",
    ]

    order = find_node_by_path(root, "/element[@name='Order']")
    assert order is not None
    assert order.name == "Order"
    assert order.documentation == "A purchase order."
    # annotation children stay in the tree
    assert order.children[0].kind == "annotation"

    sequence = find_node_by_path(root, "/element[@name='Order']/complexType/sequence")
    assert sequence is not None
    assert sequence.name == ""
    assert sequence.display_name == "sequence"
    # the comment between the elements is skipped
    assert [child.name for child in sequence.children] == [
        "tns:Customer",
        "Item",
        "cmn:Address",
    ]


def test_nested_element_path():
    root = parse_xsd(_text())
    foo = find_node_by_path(root, "/complexType[@name='Bar']/sequence/element[@name='Foo']")
    assert foo is not None
    assert foo.kind == "element"
    assert foo.attributes == {"name": "Foo", "minOccurs": "0"}


def test_path_uses_ref_when_no_name():
    root = parse_xsd(_text())
    customer_ref = find_node_by_path(
        root, "/element[@name='Order']/complexType/sequence/element[@name='tns:Customer']"
    )
    assert customer_ref is not None
    assert customer_ref.is_reference is True
    assert customer_ref.reference_name == "tns:Customer"


def test_attributes_keep_order_and_prefixes():
    root = parse_xsd(_text())
    assert list(root.attributes) == [
        "xmlns:xs",
        "xmlns:tns",
        "targetNamespace",
        "elementFormDefault",
    ]
    doc = find_node_by_path(root, "/element[@name='Customer']/annotation/documentation")
    assert doc is not None
    assert doc.attributes == {"xml:lang": "en"}


def test_ids_follow_document_order_and_restart_per_parse():
    first = parse_schema(_text())
    second = parse_schema(_text())
    assert first is not None and second is not None
    assert [node.id for node in flatten_nodes(first.root)] == list(range(len(first)))
    assert second.root.id == 0
    assert len(first) == len(second)


def test_paths_are_deterministic():
    first = parse_xsd(_text())
    second = parse_xsd(_text())
    assert [n.path for n in flatten_nodes(first)] == [n.path for n in flatten_nodes(second)]


def test_named_definitions_are_found_by_their_path():
    root = parse_xsd(_text())
    named = [
        node
        for node in flatten_nodes(root)
        if "name" in node.attributes and "ref" not in node.attributes
    ]
    assert named
    for node in named:
        assert find_node_by_path(root, node.path) is node


def test_parent_is_an_arena_index():
    tree = parse_schema(_text())
    foo = tree.find("/complexType[@name='Bar']/sequence/element[@name='Foo']")
    parent = tree.parent_of(foo)
    assert parent is not None
    assert parent.kind == "sequence"
    assert parent.id == foo.parent_id
    assert [n.display_name for n in tree.ancestors(foo)] == ["schema", "Bar", "sequence", "Foo"]
    assert tree.parent_of(tree.root) is None


def test_xsd_prefix_is_accepted():
    text = (
        '<xsd:schema xmlns:xsd="http://www.w3.org/2001/XMLSchema">'
        '<xsd:element name="A"/></xsd:schema>'
    )
    root = parse_xsd(text)
    assert root is not None
    assert root.children[0].path == "/element[@name='A']"


@pytest.mark.parametrize(
    "text",
    [
        # default namespace bound to the same URI as the xs prefix
        f'<xs:schema {XS} xmlns="http://www.w3.org/2001/XMLSchema"><xs:element name="A"/></xs:schema>',
        # xs and xsd both bound to the schema namespace
        f'<xs:schema {XS} xmlns:xsd="http://www.w3.org/2001/XMLSchema"><xs:element name="A"/></xs:schema>',
        # prefix never declared
        '<xs:schema><xs:element name="A"/></xs:schema>',
    ],
)
def test_schema_prefix_is_taken_as_written(text):
    root = parse_xsd(text)
    assert root is not None
    assert root.kind == "schema"
    [element] = root.children
    assert element.kind == "element"
    assert element.path == "/element[@name='A']"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "not xml at all",
        f"<xs:schema {XS}><xs:element name='A'>",
        "<root><child/></root>",
        '<schema xmlns="http://www.w3.org/2001/XMLSchema"/>',
    ],
)
def test_unparsable_input_returns_none(text):
    assert parse_schema(text) is None
    assert parse_xsd(text) is None


def test_anonymous_siblings_share_a_path():
    text = (
        f"<xs:schema {XS}><xs:complexType name='T'><xs:choice>"
        "<xs:sequence><xs:element name='A'/></xs:sequence>"
        "<xs:sequence><xs:element name='B'/></xs:sequence>"
        "</xs:choice></xs:complexType></xs:schema>"
    )
    tree = parse_schema(text)
    path = "/complexType[@name='T']/choice/sequence"
    sequences = [n for n in tree.iter_nodes() if n.path == path]
    assert len(sequences) == 2
    # lookup returns the first in document order
    assert tree.find(path) is sequences[0]


def test_resolution_can_be_disabled():
    parser = XSDParser(ParserConfig(resolve_references=False))
    tree = parser.parse(_text())
    refs = [n for n in tree.iter_nodes() if n.is_reference]
    assert refs
    assert all(n.resolved_target_path is None for n in refs)


def test_build_path():
    assert build_path("", "element", "Foo") == "/element[@name='Foo']"
    assert build_path("/complexType[@name='Bar']", "sequence") == "/complexType[@name='Bar']/sequence"


def test_search_nodes():
    root = parse_xsd(_text())
    results = search_nodes(root, "customer")
    paths = [n.path for n in results]
    assert "/element[@name='Customer']" in paths
    # documentation matches too
    assert "/element[@name='Order']" in [n.path for n in search_nodes(root, "purchase order")]
    assert search_nodes(root, "   ") == []
    assert len(search_nodes(root, "element", limit=2)) == 2
    assert search_nodes(root, "element", limit=0) == []
    assert search_nodes(root, "element", limit=-1) == []
    assert all(n.kind == "complexType" for n in search_nodes(root, "bar", kind="complexType"))


def test_node_kind_label():
    assert node_kind_label("complexType") == "Complex Type"
    assert node_kind_label("unique") == "unique"
