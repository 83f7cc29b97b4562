"""Minimal tokenizing reader for XML-ish project and solution markup.

Only start tags of a named element are tokenized. Attributes are extracted
explicitly, so attribute order, quoting style and `>` inside quoted values
do not matter. Nesting is not modelled: callers scan for elements flatly.

The reader is tolerant: comments are skipped, malformed attributes are
ignored. It fails only when a start tag is never closed.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from ..errors import ParseError

_NAME_TERMINATORS = frozenset(" \t\r\n/>=")


@dataclass
class StartTag:
    """A tokenized start tag."""

    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    start: int = 0
    """Offset of the opening '<'."""

    end: int = 0
    """Offset just past the closing '>'."""

    self_closing: bool = False

    def get(self, attribute: str) -> str | None:
        """Get an attribute value by exact name."""
        return self.attributes.get(attribute)


def _is_name_boundary(content: str, pos: int) -> bool:
    """Whether the element name ends at pos."""
    return pos >= len(content) or content[pos] in _NAME_TERMINATORS


def _read_start_tag(content: str, start: int, name: str) -> StartTag:
    """Tokenize the start tag beginning at content[start] == '<'."""
    tag = StartTag(name=name, start=start)
    pos = start + 1 + len(name)
    length = len(content)

    while pos < length:
        char = content[pos]

        if char.isspace():
            pos += 1
            continue

        if char == ">":
            tag.end = pos + 1
            return tag

        if content.startswith("/>", pos):
            tag.end = pos + 2
            tag.self_closing = True
            return tag

        if char == "/":
            pos += 1
            continue

        # Attribute name
        name_start = pos
        while pos < length and content[pos] not in _NAME_TERMINATORS:
            pos += 1
        attr_name = content[name_start:pos]
        if not attr_name:
            # Stray '=' with no name
            pos += 1
            continue

        while pos < length and content[pos].isspace():
            pos += 1
        if pos >= length or content[pos] != "=":
            # Valueless attribute
            tag.attributes.setdefault(attr_name, "")
            continue

        pos += 1
        while pos < length and content[pos].isspace():
            pos += 1
        if pos >= length:
            break

        quote = content[pos]
        if quote in ("'", '"'):
            value_end = content.find(quote, pos + 1)
            if value_end == -1:
                break
            value = content[pos + 1 : value_end]
            pos = value_end + 1
        else:
            value_start = pos
            while pos < length and not content[pos].isspace() and content[pos] != ">":
                if content.startswith("/>", pos):
                    break
                pos += 1
            value = content[value_start:pos]

        tag.attributes.setdefault(attr_name, value)

    raise ParseError(f"Invalid XML: unclosed {name} tag at offset {start}")


def iter_start_tags(content: str, name: str) -> Iterator[StartTag]:
    """Yield every start tag of the element `name`, in document order.

    Matches the exact element name: scanning for "Project" does not
    match "<Projects>" or "<ProjectReference>".

    Raises:
        ParseError: If a matching start tag has no closing '>'
    """
    marker = "<" + name
    pos = 0
    while True:
        candidate = content.find("<", pos)
        if candidate == -1:
            return

        if content.startswith("<!--", candidate):
            comment_end = content.find("-->", candidate + 4)
            if comment_end == -1:
                return
            pos = comment_end + 3
            continue

        if content.startswith(marker, candidate) and _is_name_boundary(
            content, candidate + len(marker)
        ):
            tag = _read_start_tag(content, candidate, name)
            yield tag
            pos = tag.end
            continue

        pos = candidate + 1


def find_element_end(content: str, tag: StartTag) -> int:
    """Find the offset just past the end of the element opened by tag.

    Raises:
        ParseError: If a non-self-closing element has no closing tag
    """
    if tag.self_closing:
        return tag.end
    closing = f"</{tag.name}>"
    close_at = content.find(closing, tag.end)
    if close_at == -1:
        raise ParseError(f"Invalid XML: unclosed {tag.name} element at offset {tag.start}")
    return close_at + len(closing)


def child_text(content: str, start: int, end: int, child: str) -> str | None:
    """Text of the first <child>...</child> element within content[start:end]."""
    body = content[start:end]
    for tag in iter_start_tags(body, child):
        if tag.self_closing:
            return None
        close_at = body.find(f"</{child}>", tag.end)
        if close_at == -1:
            return None
        return body[tag.end : close_at].strip()
    return None
