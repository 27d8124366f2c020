"""Read tag names, attributes and documentation from tokenized XML.

The tree builder never looks at raw parser events. Schema text is first
turned into a list of generic, order-preserving :class:`XmlNode` objects by
:func:`tokenize`, and each node is then interpreted by :func:`read_tag`.

Tokenizer behavior:
* Built on :mod:`xml.parsers.expat` (the parser ElementTree wraps) without
    namespace processing, so expat still checks well-formedness but tag and
    attribute names arrive exactly as written: ``<xs:element>`` is reported
    as ``xs:element`` whatever URI ``xs`` is bound to, and a prefix with no
    declaration is not an error.
* Attributes keep document order and their written names (``xml:lang``,
    ``xmlns``, ``xmlns:<prefix>``).
* Character data and comments become ``#text`` / ``#comment`` pseudo nodes
    in document order; whitespace-only text is dropped.

Example:
        from xsd_review_api.tag_reader import tokenize, read_tag

        [root] = tokenize('<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"/>')
        info = read_tag(root)
        print(info.kind)                  # schema
        print(info.attributes)            # {'xmlns:xs': 'http://www.w3.org/2001/XMLSchema'}
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union
from xml.parsers import expat

TEXT = "#text"
COMMENT = "#comment"

SCHEMA_PREFIXES: Tuple[str, ...] = ("xs", "xsd")


@dataclass
class XmlNode:
    """Generic tokenizer node.

    Element nodes carry their qualified ``tag``; pseudo nodes use ``#text``
    or ``#comment`` and keep their content in ``text``.
    """

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["XmlNode"] = field(default_factory=list)
    text: Optional[str] = None

    @property
    def is_element(self) -> bool:
        return not self.tag.startswith("#")


@dataclass
class TagInfo:
    tag: str
    kind: str
    attributes: Dict[str, str]
    documentation: Optional[str] = None


class _NodeBuilder:
    """Expat handlers producing :class:`XmlNode` trees."""

    def __init__(self) -> None:
        self.top: List[XmlNode] = []
        self._stack: List[XmlNode] = []
        self._text: List[str] = []

    def bind(self, parser) -> None:
        parser.StartElementHandler = self.start
        parser.EndElementHandler = self.end
        parser.CharacterDataHandler = self.data
        parser.CommentHandler = self.comment

    def start(self, tag: str, attrib: List[str]) -> None:
        self._flush_text()
        # ordered_attributes: [name1, value1, name2, value2, ...]
        attributes = dict(zip(attrib[0::2], attrib[1::2]))
        node = XmlNode(tag=tag, attributes=attributes)
        self._append(node)
        self._stack.append(node)

    def end(self, tag: str) -> None:
        self._flush_text()
        self._stack.pop()

    def data(self, data: str) -> None:
        self._text.append(data)

    def comment(self, text: str) -> None:
        self._flush_text()
        self._append(XmlNode(tag=COMMENT, text=text))

    def close(self) -> List[XmlNode]:
        self._flush_text()
        return self.top

    def _append(self, node: XmlNode) -> None:
        if self._stack:
            self._stack[-1].children.append(node)
        else:
            self.top.append(node)

    def _flush_text(self) -> None:
        if not self._text:
            return
        text = "".join(self._text)
        self._text = []
        if text.strip():
            self._append(XmlNode(tag=TEXT, text=text))


def tokenize(text: Union[str, bytes]) -> List[XmlNode]:
    """Tokenize an XML document into its top-level :class:`XmlNode` list.

    Raises:
        xml.parsers.expat.ExpatError: If the text is not well-formed XML.
    """
    if isinstance(text, str):
        text = text.lstrip("\ufeff")
    parser = expat.ParserCreate()
    parser.ordered_attributes = True
    builder = _NodeBuilder()
    builder.bind(parser)
    parser.Parse(text, True)
    return builder.close()


def strip_schema_prefix(tag: str, prefixes: Sequence[str] = SCHEMA_PREFIXES) -> str:
    """Remove a leading schema namespace prefix (``xs:``/``xsd:``) from a tag."""
    pattern = r"^(?:%s):" % "|".join(re.escape(p) for p in prefixes)
    return re.sub(pattern, "", tag, count=1)


def is_schema_tag(tag: str, local: str, prefixes: Sequence[str] = SCHEMA_PREFIXES) -> bool:
    return any(tag == f"{prefix}:{local}" for prefix in prefixes)


def is_schema_root(node: XmlNode, prefixes: Sequence[str] = SCHEMA_PREFIXES) -> bool:
    """True for an ``xs:schema`` / ``xsd:schema`` element."""
    return node.is_element and is_schema_tag(node.tag, "schema", prefixes)


def read_documentation(
    children: Iterable[XmlNode], prefixes: Sequence[str] = SCHEMA_PREFIXES
) -> Optional[str]:
    """Return the trimmed text of the first ``annotation/documentation`` child.

    Only direct children are inspected: one level into ``annotation``, one
    level into ``documentation``, then the first text-bearing grandchild.
    """
    for child in children:
        if not is_schema_tag(child.tag, "annotation", prefixes):
            continue
        for annotation_child in child.children:
            if not is_schema_tag(annotation_child.tag, "documentation", prefixes):
                continue
            for item in annotation_child.children:
                if item.tag == TEXT and item.text and item.text.strip():
                    return item.text.strip()
    return None


def read_tag(node: XmlNode, prefixes: Sequence[str] = SCHEMA_PREFIXES) -> Optional[TagInfo]:
    """Interpret one tokenizer node.

    Returns:
        ``None`` for text, comment and other pseudo nodes, otherwise a
        :class:`TagInfo` with the unprefixed kind, the attribute map and the
        node's own documentation.
    """
    if not node.is_element:
        return None
    return TagInfo(
        tag=node.tag,
        kind=strip_schema_prefix(node.tag, prefixes),
        attributes={key: str(value) for key, value in node.attributes.items()},
        documentation=read_documentation(node.children, prefixes),
    )
