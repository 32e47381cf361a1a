"""gpsd JSON field parsing utilities.

Every message field is decoded by a small parser with the signature
``parser(value, name) -> result``: ``value`` is whatever ``json.loads``
produced for the key (``None`` when the key is absent or ``null``) and
``name`` is the wire key, used to label failures. Parsers either return the
canonical Python value or raise ``DecodeError`` naming the field.

JSON has a single number type, so the checks follow Python's view of the
parsed value: ``bool`` is rejected wherever a number is expected (it is an
``int`` subclass), integers are widened where floats are expected, and
floats are never narrowed to integers.

Two fields need more than a type check because their wire encoding changed
between daemon releases; see ``parse_activated`` and ``parse_mode``.
"""

import dataclasses
from collections.abc import Callable
from typing import Any, TypeVar

from gpsd_proto.protocol.errors import DecodeError
from gpsd_proto.protocol.mode import Mode

__all__ = [
    "Parser",
    "build",
    "object_list",
    "optional_bool",
    "optional_float",
    "optional_int",
    "optional_str",
    "parse_activated",
    "parse_mode",
    "required",
    "uint8",
    "wire_field",
    "wire_name",
]

T = TypeVar("T")
Parser = Callable[[Any, str], Any]


def _describe(value: Any) -> str:
    """Name the JSON type of *value* for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return f"boolean {str(value).lower()}"
    if isinstance(value, int):
        return f"integer {value}"
    if isinstance(value, float):
        return f"number {value}"
    if isinstance(value, str):
        return f"string {value!r}"
    if isinstance(value, list):
        return "array"
    return "object"


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# --- scalar parsers -----------------------------------------------------------


def optional_float(value: Any, name: str) -> float | None:
    """Parse a numeric field; integers are widened to float.

    Example:
        >>> optional_float(545, "alt")
        545.0
        >>> optional_float(None, "alt") is None
        True
    """
    if value is None:
        return None
    if _is_integer(value) or isinstance(value, float):
        return float(value)
    raise DecodeError(f"expected a number, got {_describe(value)}", field=name)


def optional_int(value: Any, name: str) -> int | None:
    """Parse an integer field; floats and booleans are rejected."""
    if value is None:
        return None
    if _is_integer(value):
        return value
    raise DecodeError(f"expected an integer, got {_describe(value)}", field=name)


def optional_str(value: Any, name: str) -> str | None:
    """Parse a string field."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    raise DecodeError(f"expected a string, got {_describe(value)}", field=name)


def optional_bool(value: Any, name: str) -> bool | None:
    """Parse a boolean field; ``0`` and ``1`` are not booleans."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    raise DecodeError(f"expected a boolean, got {_describe(value)}", field=name)


def uint8(value: Any, name: str) -> int | None:
    """Parse a small unsigned integer (0-255), such as a protocol revision."""
    number = optional_int(value, name)
    if number is not None and not 0 <= number <= 255:
        raise DecodeError(f"expected an integer in 0..255, got {number}", field=name)
    return number


def required(parser: Parser) -> Parser:
    """Wrap *parser* so that an absent or ``null`` value is a decode error."""

    def parse_required(value: Any, name: str) -> Any:
        if value is None:
            raise DecodeError("missing required field", field=name)
        return parser(value, name)

    return parse_required


# --- quirky fields ------------------------------------------------------------


def parse_activated(value: Any, name: str = "activated") -> str | None:
    """Parse a device activation timestamp.

    The logical value is "ISO 8601 timestamp or absent". Some gpsd releases
    report an inactive device as the integer ``0`` instead of omitting the
    key, so ``0`` is folded into ``None``. Any other non-string encoding is
    ambiguous and rejected.

    Args:
        value: Raw JSON value of the field, ``None`` if absent.
        name: Wire key, used in the error message.

    Returns:
        The timestamp string, or ``None`` if the device is not activated.

    Raises:
        DecodeError: For booleans, non-zero integers and any other type.

    Example:
        >>> parse_activated("2024-01-10T11:36:48.480Z")
        '2024-01-10T11:36:48.480Z'
        >>> parse_activated(0) is None
        True
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if _is_integer(value) and value == 0:
        return None
    raise DecodeError(
        f"expected a timestamp string or 0, got {_describe(value)}", field=name
    )


def parse_mode(value: Any, name: str = "mode") -> Mode:
    """Parse the TPV fix mode.

    Total over the integers: ``2`` and ``3`` are 2D and 3D fixes, every other
    integer (including out-of-range values from newer daemons) is ``NO_FIX``.
    A missing mode is also ``NO_FIX`` so that it never blocks an otherwise
    valid report. Only non-integer encodings are rejected.

    Example:
        >>> parse_mode(3)
        <Mode.FIX_3D: 3>
        >>> parse_mode(99)
        <Mode.NO_FIX: 1>
    """
    if value is None:
        return Mode.NO_FIX
    if _is_integer(value):
        return Mode.from_wire(value)
    raise DecodeError(f"expected an integer mode, got {_describe(value)}", field=name)


# --- message objects ----------------------------------------------------------


def wire_field(parser: Parser, wire: str | None = None, default: Any = None) -> Any:
    """Declare a dataclass field decoded from the JSON key *wire*.

    *wire* defaults to the attribute name.
    """
    return dataclasses.field(default=default, metadata={"parse": parser, "wire": wire})


def wire_name(field: dataclasses.Field) -> str:
    return field.metadata.get("wire") or field.name


def build(cls: type[T], obj: dict[str, Any]) -> T:
    """Construct the message dataclass *cls* from a parsed JSON object.

    Keys without a matching field are ignored so that newer daemons can add
    attributes without breaking older clients.
    """
    kwargs = {}
    for field in dataclasses.fields(cls):  # type: ignore[arg-type]
        parser = field.metadata.get("parse")
        if parser is None:
            continue
        name = wire_name(field)
        kwargs[field.name] = parser(obj.get(name), name)
    return cls(**kwargs)


def object_list(cls: type[T]) -> Parser:
    """Return a parser for an optional array of *cls* objects.

    The parsed list is returned as a tuple to keep messages immutable.
    """

    def parse_objects(value: Any, name: str) -> tuple[T, ...] | None:
        if value is None:
            return None
        if not isinstance(value, list):
            raise DecodeError(f"expected an array, got {_describe(value)}", field=name)
        items = []
        for index, item in enumerate(value):
            if not isinstance(item, dict):
                raise DecodeError(
                    f"expected an object, got {_describe(item)}",
                    field=f"{name}[{index}]",
                )
            try:
                items.append(build(cls, item))
            except DecodeError as exc:
                raise DecodeError(exc.reason, field=f"{name}[{index}].{exc.field}") from exc
        return tuple(items)

    return parse_objects
