"""
Forward-only stream of document events.

Both decoders consume the document through iter_events(), a thin layer over
ElementTree's XMLPullParser:

    <map width="2" ...>          -> START map
        <layer name="Ground">    -> START layer
            <data ...>AQAA..     -> START data
            </data>              -> END   data   (element text is complete here)
        </layer>                 -> END   layer
    </map>                       -> END   map

Only START and END are emitted. Text is read from the element on its END
event, when the parser guarantees it is complete; text that follows a child
(its tail) is complete by the time the parent ends.

The parser builds a tree as it goes. The children of an element are dropped
right after its END event has been handled, and an element directly under
the root is also detached from it, so the root never accumulates a child
per top-level element. Memory stays bounded by the largest single top-level
element rather than the document size.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from .config import DEFAULT_LIMITS, DecodeLimits
from .errors import LimitExceededError, StructuralError

CHUNK_SIZE = 64 * 1024


class EventKind(Enum):
    START = "start"
    END = "end"


@dataclass
class DocumentEvent:
    """
    One element boundary.

    element:  the ElementTree element (attrib valid on START, text on END)
    parent:   tag of the enclosing element, None for the root
    depth:    0 for the root element
    """
    kind: EventKind
    element: ET.Element
    parent: Optional[str]
    depth: int

    @property
    def tag(self) -> str:
        return self.element.tag


def _structural(error: ET.ParseError) -> StructuralError:
    position = getattr(error, "position", None)
    # ParseError's message already ends with ": line X, column Y"
    message = str(error).split(":")[0] if position else str(error)
    return StructuralError(f"malformed document: {message}", position=position)


def iter_events(data: bytes,
                limits: DecodeLimits = DEFAULT_LIMITS) -> Iterator[DocumentEvent]:
    """
    Yield START/END events for every element of `data`, in document order.

    Raises:
    -------
    LimitExceededError : the document is larger than limits.max_document_bytes
    StructuralError : malformed XML, mismatched tags, or the document ends
                      before every element is closed (including empty input)
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"expected bytes, got {type(data).__name__}")
    if len(data) > limits.max_document_bytes:
        raise LimitExceededError(
            f"document is {len(data)} bytes, limit is {limits.max_document_bytes}")

    parser = ET.XMLPullParser(events=("start", "end"))
    stack = []
    view = memoryview(data)

    def drain():
        for event, element in parser.read_events():
            if event == "start":
                parent = stack[-1].tag if stack else None
                stack.append(element)
                yield DocumentEvent(EventKind.START, element, parent, len(stack) - 1)
            else:
                stack.pop()
                parent = stack[-1].tag if stack else None
                yield DocumentEvent(EventKind.END, element, parent, len(stack))
                del element[:]
                if len(stack) == 1:
                    stack[0].remove(element)

    try:
        for offset in range(0, len(view), CHUNK_SIZE):
            parser.feed(bytes(view[offset:offset + CHUNK_SIZE]))
            yield from drain()
        parser.close()
        yield from drain()
    except ET.ParseError as e:
        raise _structural(e) from e
    except (LookupError, ValueError) as e:
        # Unknown or broken encoding declarations surface from the codec layer
        raise StructuralError(f"cannot decode document text: {e}") from e
