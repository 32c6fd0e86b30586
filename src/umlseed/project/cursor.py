"""Depth-tracking cursor over a streaming XML pull parser.

MagicDraw documents are matched by qualified names (``xmi:id``,
``SQLProfile:PrimaryKey``) rather than namespace URIs, because the profile
URIs differ between tool versions while the prefixes do not. The cursor
therefore maps every ``{uri}local`` name produced by ElementTree back to
``prefix:local`` using the prefixes declared in the document.

Nested elements are handled without materializing a tree first:
``descend(cursor, visit)`` pulls events until the current element closes and
calls ``visit`` for every start tag in between. ``visit`` may itself call
``descend`` to consume a nested subtree.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import IO

from umlseed.core.errors import ArchiveError

_CHUNK_SIZE = 64 * 1024
_XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


class EventKind(Enum):
    START = "start"
    END = "end"
    END_DOCUMENT = "end_document"


@dataclass(frozen=True, slots=True)
class Event:
    """A single pull-parser event with prefix-qualified names."""

    kind: EventKind
    name: str = ""
    attributes: Mapping[str, str] = field(default_factory=dict)
    text: str = ""  # direct character content, END events only


Attributes = Mapping[str, str]
Visitor = Callable[["EventCursor", str, Attributes], None]


class EventCursor:
    """Forward-only event reader that tracks element nesting depth."""

    def __init__(self, stream: IO[bytes], *, document: str = "<document>") -> None:
        self.document = document
        self.depth = 0
        self._stream = stream
        self._parser = ET.XMLPullParser(events=("start", "end", "start-ns", "end-ns"))
        self._events: deque[Event] = deque()
        self._bindings: list[tuple[str, str]] = [("xml", _XML_NAMESPACE)]
        self._exhausted = False

    def next(self) -> Event:
        """Return the next start/end event, or END_DOCUMENT once the input is consumed."""
        while not self._events:
            if self._exhausted:
                return Event(EventKind.END_DOCUMENT)
            self._pump()

        event = self._events.popleft()
        if event.kind is EventKind.START:
            self.depth += 1
        elif event.kind is EventKind.END:
            self.depth -= 1
        return event

    def _pump(self) -> None:
        chunk = self._stream.read(_CHUNK_SIZE)
        try:
            if chunk:
                self._parser.feed(chunk)
            else:
                self._exhausted = True
                if self.depth > 0:
                    raise ArchiveError.end_of_document(self.document)
                self._parser.close()
            # Syntax errors found by feed() surface here, not in feed() itself
            events = list(self._parser.read_events())
        except ET.ParseError as e:
            if self._exhausted:
                raise ArchiveError.end_of_document(self.document) from e
            raise ArchiveError.malformed_xml(self.document, str(e)) from e

        for kind, payload in events:
            if kind == "start-ns":
                prefix, uri = payload  # type: ignore[misc]
                self._bindings.append((prefix, uri))
            elif kind == "end-ns":
                self._bindings.pop()
            elif kind == "start":
                elem: ET.Element = payload  # type: ignore[assignment]
                self._events.append(
                    Event(
                        EventKind.START,
                        name=self._qualify(elem.tag),
                        attributes={self._qualify(k): v for k, v in elem.attrib.items()},
                    )
                )
            elif kind == "end":
                elem = payload  # type: ignore[assignment]
                self._events.append(
                    Event(EventKind.END, name=self._qualify(elem.tag), text=elem.text or "")
                )
                # Names, attributes and text are captured; drop the subtree
                elem.clear()

    def _qualify(self, name: str) -> str:
        if not name.startswith("{"):
            return name
        uri, local = name[1:].split("}", 1)
        for prefix, bound_uri in reversed(self._bindings):
            if bound_uri == uri:
                return f"{prefix}:{local}" if prefix else local
        return local


def descend(cursor: EventCursor, visit: Visitor) -> None:
    """Consume the element the cursor is inside, visiting every nested start tag.

    Must be called right after the element's own start event. Returns once
    the depth drops below the element's depth.

    Raises:
        ArchiveError: If the document ends before the element closes.
    """
    stop_depth = cursor.depth - 1
    while True:
        event = cursor.next()
        if event.kind is EventKind.START:
            visit(cursor, event.name, event.attributes)
            if cursor.depth == stop_depth:
                return
        elif event.kind is EventKind.END:
            if cursor.depth == stop_depth:
                return
        else:
            raise ArchiveError.end_of_document(cursor.document)


def scan(cursor: EventCursor, visit: Visitor) -> None:
    """Visit every start tag until the end of the document."""
    while True:
        event = cursor.next()
        if event.kind is EventKind.END_DOCUMENT:
            return
        if event.kind is EventKind.START:
            visit(cursor, event.name, event.attributes)


def element_text(cursor: EventCursor) -> str:
    """Consume the current element and return its direct character content."""
    stop_depth = cursor.depth - 1
    while True:
        event = cursor.next()
        if event.kind is EventKind.END:
            if cursor.depth == stop_depth:
                return event.text
        elif event.kind is EventKind.END_DOCUMENT:
            raise ArchiveError.end_of_document(cursor.document)


def get_attribute(attributes: Attributes, name: str, *, element: str = "") -> str:
    """Return a required attribute value.

    Raises:
        ArchiveError: If the attribute is absent.
    """
    try:
        return attributes[name]
    except KeyError:
        raise ArchiveError.attribute_missing(element, name) from None


def has_attribute(attributes: Attributes, name: str, expected: str) -> bool:
    return attributes.get(name) == expected


def href_fragment(attributes: Attributes) -> str | None:
    """Return the id after ``#`` in an ``href`` attribute, if any."""
    href = attributes.get("href")
    if href is None or "#" not in href:
        return None
    return href.split("#", 1)[1]
