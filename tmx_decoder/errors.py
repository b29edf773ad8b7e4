"""
Typed decode errors.

Every failure while decoding a TMX/TSX document is reported as a subclass
of DecodeError. Nothing in the decoders prints, exits or returns a
half-built model: the caller gets either a complete Map/Tileset or one of
these exceptions.

    DecodeError
    ├── StructuralError           malformed XML, tag mismatch, early EOF
    ├── MissingFieldError         required attribute / sub-element absent
    ├── AttributeTypeError        attribute does not parse as expected type
    ├── UnsupportedEncodingError  layer data not base64 (or bad compression)
    ├── PayloadDecodeError        base64 / decompression / word alignment
    ├── SizeMismatchError         decoded tile count != width * height
    └── LimitExceededError        input larger than the configured limits
"""

from typing import Optional, Tuple


class DecodeError(Exception):
    """
    Base class for all decode failures.

    Attributes:
    -----------
    element : str or None
        Name of the element being decoded when the error happened
    position : (line, column) or None
        Location in the document, when the XML parser knows it
    """

    def __init__(self, message: str, element: Optional[str] = None,
                 position: Optional[Tuple[int, int]] = None):
        super().__init__(message)
        self.message = message
        self.element = element
        self.position = position

    def __str__(self) -> str:
        parts = [self.message]
        if self.element:
            parts.append(f"in <{self.element}>")
        if self.position:
            line, column = self.position
            parts.append(f"at line {line}, column {column}")
        return " ".join(parts)


class StructuralError(DecodeError):
    """Unexpected or mismatched nesting, wrong root, premature end of document."""


class MissingFieldError(DecodeError):
    """A required attribute or sub-element is absent."""

    def __init__(self, field: str, element: Optional[str] = None,
                 position: Optional[Tuple[int, int]] = None):
        super().__init__(f"missing required field '{field}'", element, position)
        self.field = field


class AttributeTypeError(DecodeError):
    """An attribute value does not parse as the expected type."""

    def __init__(self, field: str, value: str, expected: str,
                 element: Optional[str] = None,
                 position: Optional[Tuple[int, int]] = None):
        super().__init__(
            f"attribute '{field}' has value {value!r}, expected {expected}",
            element, position)
        self.field = field
        self.value = value
        self.expected = expected


class UnsupportedEncodingError(DecodeError):
    """Layer data uses an encoding (or compression) this decoder cannot read."""

    def __init__(self, encoding: Optional[str], what: str = "encoding",
                 element: Optional[str] = "data"):
        if encoding is None:
            message = f"layer data has no {what}, only base64 is supported"
        else:
            message = f"unsupported layer data {what} {encoding!r}"
        super().__init__(message, element)
        self.encoding = encoding


class PayloadDecodeError(DecodeError):
    """The layer payload is not valid base64 or not a whole number of words."""


class SizeMismatchError(DecodeError):
    """The decoded tile count differs from the declared width * height."""

    def __init__(self, expected: int, actual: int,
                 element: Optional[str] = "data"):
        super().__init__(
            f"layer data holds {actual} tiles, expected {expected}", element)
        self.expected = expected
        self.actual = actual


class LimitExceededError(DecodeError):
    """The document or a declared grid is larger than the decode limits allow."""
