"""Parse query and document strings into filter documents."""

import json
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

import yaml
from bson import ObjectId, json_util
from bson.errors import BSONError

from .errors import ParseError

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)

_IDENTIFIER = re.compile(r"[\w$]+")
_CALL_START = re.compile(r"(?:new\s+)?[A-Za-z_$][\w$]*\s*\(")
_CALL = re.compile(
    r"(?:new\s+)?(?P<name>[A-Za-z_$][\w$]*)\s*\(\s*"
    r"(?:\"(?P<double>[^\"\\]*)\"|'(?P<single>[^'\\]*)'|(?P<number>-?\d+(?:\.\d+)?))?"
    r"\s*\)"
)
_REGEX = re.compile(r"/(?P<pattern>(?:\\.|[^/\\\n])+)/(?P<flags>[imxsu]*)")


def parse_document(text: str | None) -> dict[str, Any]:
    """Parse a query/document string into a document.

    Strict (extended) JSON is tried first so that ``$oid``/``$date`` wrappers
    decode to BSON types. Anything else is read as mongo shell syntax
    (unquoted keys, single-quoted strings): ``ObjectId(...)``, ``ISODate(...)``,
    ``new Date(...)``, ``NumberLong(...)``, ``NumberInt(...)``,
    ``NumberDecimal(...)`` and ``/pattern/flags`` are rewritten to their
    extended JSON form and the result is read as a YAML flow mapping.

    Args:
        text: Query string, e.g. ``{"age": {"$gt": 18}}`` or ``{ _id: ObjectId('...') }``

    Returns:
        The parsed document

    Raises:
        ParseError: If the text is empty, malformed, or not a document
    """
    if text is None or not text.strip():
        raise ParseError("Query string is empty")

    try:
        value = json_util.loads(text)
    except (ValueError, TypeError, BSONError):
        value = _parse_shell_syntax(text)

    if not isinstance(value, dict):
        raise ParseError(f"Query string must describe a document (found: {type(value).__name__})")
    return value


def _parse_shell_syntax(text: str) -> Any:
    if not text.lstrip().startswith("{"):
        raise ParseError("Query string must describe a document (expected '{')")
    translated = _translate_shell_literals(text)
    try:
        value = yaml.safe_load(translated)
    except yaml.YAMLError as e:
        raise ParseError(f"Malformed query string: {e}") from e
    try:
        return _decode_extended(value)
    except (ValueError, TypeError, BSONError) as e:
        raise ParseError(f"Malformed query string: {e}") from e


def _translate_shell_literals(text: str) -> str:
    """Rewrite shell constructors and regex literals outside quoted strings."""
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in "\"'":
            end = _string_end(text, i)
            out.append(text[i:end])
            i = end
        elif ch == "/" and _in_value_position(out):
            match = _REGEX.match(text, i)
            if match is None:
                raise ParseError(f"Malformed regular expression at position {i}")
            out.append(json.dumps({"$regex": match["pattern"], "$options": match["flags"]}))
            i = match.end()
        elif _CALL_START.match(text, i):
            match = _CALL.match(text, i)
            if match is None:
                raise ParseError(f"Malformed constructor call at position {i}")
            out.append(_constructor(match))
            i = match.end()
        else:
            # Copy whole words so a call is only recognised at a word boundary
            word = _IDENTIFIER.match(text, i)
            end = word.end() if word else i + 1
            out.append(text[i:end])
            i = end
    return "".join(out)


def _string_end(text: str, start: int) -> int:
    quote = text[start]
    i = start + 1
    while i < len(text):
        ch = text[i]
        if quote == '"' and ch == "\\":
            i += 2
            continue
        if ch == quote:
            # YAML escapes a single quote by doubling it
            if quote == "'" and text[i + 1 : i + 2] == "'":
                i += 2
                continue
            return i + 1
        i += 1
    return len(text)


def _in_value_position(out: list[str]) -> bool:
    preceding = "".join(out).rstrip()
    return preceding[-1:] in (":", ",", "[")


def _constructor(match: re.Match) -> str:
    name = match["name"]
    argument = match["double"] if match["double"] is not None else match["single"]
    number = match["number"]

    if name == "ObjectId":
        if argument is None or not ObjectId.is_valid(argument):
            raise ParseError(f"Invalid ObjectId: {match.group()}")
        return json.dumps({"$oid": argument})
    if name in ("ISODate", "Date"):
        if number is not None and "." not in number:
            return json.dumps({"$date": int(number)})
        if argument is None:
            raise ParseError(f"{name}() needs a date string: {match.group()}")
        return json.dumps({"$date": _to_millis(argument)})
    if name in ("NumberLong", "NumberInt"):
        digits = number if number is not None else argument
        if digits is None or not re.fullmatch(r"-?\d+", digits):
            raise ParseError(f"{name}() needs an integer: {match.group()}")
        if name == "NumberInt":
            return digits
        return json.dumps({"$numberLong": digits})
    if name == "NumberDecimal":
        digits = number if number is not None else argument
        if digits is None:
            raise ParseError(f"NumberDecimal() needs a value: {match.group()}")
        return json.dumps({"$numberDecimal": digits})
    raise ParseError(f"Unsupported constructor in query string: {name}()")


def _to_millis(value: str) -> int:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError as e:
        raise ParseError(f"Invalid date: {value!r}") from e
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // _MILLISECOND


def _decode_extended(value: Any) -> Any:
    if isinstance(value, dict):
        for key in value:
            if not isinstance(key, str):
                raise ParseError(f"Document keys must be strings (found: {key!r})")
        return json_util.object_hook({key: _decode_extended(item) for key, item in value.items()})
    if isinstance(value, list):
        return [_decode_extended(item) for item in value]
    if isinstance(value, date) and not isinstance(value, datetime):
        # BSON has no date-only type
        return datetime(value.year, value.month, value.day)
    return value
