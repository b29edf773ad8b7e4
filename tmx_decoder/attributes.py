"""
Typed attribute extraction shared by the map and tileset decoders.

TMX stores every value as an attribute string. Instead of converting each
one inline per element type, both decoders go through read_attribute(),
which knows how to parse each target type and reports a typed error that
names the attribute and the element it was read from.
"""

import math
from enum import Enum
from typing import Any, Mapping, Optional

from .config import U32_MAX
from .errors import AttributeTypeError, MissingFieldError


class AttributeKind(Enum):
    UINT = "unsigned integer"
    FLOAT = "finite number"
    BOOL = "boolean (true/false/1/0)"
    STR = "string"


# Tiled writes visible="0"/"1"; hand-written files often use true/false
_BOOL_VALUES = {"true": True, "1": True, "false": False, "0": False}


def parse_uint(text: str) -> Optional[int]:
    """Parse a u32 written as plain ASCII digits. Returns None if invalid."""
    if not text or not text.isascii() or not text.isdigit():
        return None
    value = int(text)
    if value > U32_MAX:
        return None
    return value


def parse_float(text: str) -> Optional[float]:
    if "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_bool(text: str) -> Optional[bool]:
    return _BOOL_VALUES.get(text)


_PARSERS = {
    AttributeKind.UINT: parse_uint,
    AttributeKind.FLOAT: parse_float,
    AttributeKind.BOOL: parse_bool,
    AttributeKind.STR: lambda text: text,
}


def read_attribute(attrib: Mapping[str, str], name: str, kind: AttributeKind,
                   element: str, required: bool = False, default: Any = None) -> Any:
    """
    Read one attribute and convert it to the requested type.

    Parameters:
    -----------
    attrib : mapping
        Attributes of the element (ElementTree's elem.attrib)
    name : str
        Attribute name, e.g. "tilewidth"
    kind : AttributeKind
        Target type
    element : str
        Element name, used in error messages
    required : bool
        Raise MissingFieldError if the attribute is absent. For strings an
        empty value counts as absent.
    default : any
        Returned when the attribute is absent and not required

    Raises:
    -------
    MissingFieldError : required attribute absent
    AttributeTypeError : attribute present but not parseable as `kind`
    """
    raw = attrib.get(name)
    if raw is None or (kind is AttributeKind.STR and raw == ""):
        if required:
            raise MissingFieldError(name, element)
        return default

    value = _PARSERS[kind](raw)
    if value is None:
        raise AttributeTypeError(name, raw, kind.value, element)
    return value
