"""Record schemas and decoders.

Two schema variants exist and are deliberately not unified:

- ``"scored"``: ``url`` and ``score`` are required (``ScoredStory``).
- ``"text"``: ``url`` may be absent, meaning a text-only item (``Story``).

Decoders are pure functions from an untyped JSON tree to a ``Result``. A record
is only ever created by a successful decode.
"""

from __future__ import annotations

from functools import partial
import json
from typing import TYPE_CHECKING, Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, StrictInt, TypeAdapter, ValidationError

from storyfeed.errors import DecodeError, MissingFieldError, TypeMismatchError
from storyfeed.result import Failure, Result, Success

T = TypeVar("T")

if TYPE_CHECKING:
    from collections.abc import Callable

SchemaVariant = Literal["scored", "text"]
SCHEMA_VARIANTS: tuple[SchemaVariant, ...] = ("scored", "text")

_EXPECTED = {
    "int_type": "an int",
    "string_type": "a string",
    "none_required": "null",
}


class Story(BaseModel):
    """An item whose link is optional (``url is None`` for text-only posts)."""

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    id: int
    title: str
    url: str | None = None


class ScoredStory(BaseModel):
    """An item that always links out and carries a score."""

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    id: int
    title: str
    url: str
    score: int


Record = Story | ScoredStory

_MODELS: dict[SchemaVariant, type[BaseModel]] = {
    "scored": ScoredStory,
    "text": Story,
}

# Strict: booleans and numeric strings are not identifiers.
_INDEX: TypeAdapter[list[int]] = TypeAdapter(list[StrictInt])


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "a boolean"
    if isinstance(value, (int, float)):
        return "a number"
    if isinstance(value, str):
        return "a string"
    if isinstance(value, list):
        return "an array"
    return "an object"


def _to_decode_error(exc: ValidationError, raw: dict[str, Any]) -> DecodeError:
    # pydantic reports in field declaration order; the first error wins
    first = exc.errors()[0]
    loc = first.get("loc") or ()
    field = str(loc[0]) if loc else ""
    if first["type"] == "missing":
        return MissingFieldError(field)
    expected = _EXPECTED.get(first["type"], "a valid value")
    got = raw.get(field) if field else raw
    return TypeMismatchError(field, expected, got)


def decode_record(raw: Any, variant: SchemaVariant = "scored") -> Result[Record, DecodeError]:
    """Decode one record payload with the given schema variant.

    Args:
        raw: Parsed JSON value, expected to be an object.
        variant: Which record schema to apply.

    Returns:
        ``Success(record)`` or ``Failure`` with a ``MissingFieldError`` or
        ``TypeMismatchError`` naming the offending field.
    """
    if not isinstance(raw, dict):
        return Failure(TypeMismatchError("", "an object", raw))
    model = _MODELS[variant]
    try:
        return Success(model.model_validate(raw))
    except ValidationError as exc:
        return Failure(_to_decode_error(exc, raw))


def record_decoder(variant: SchemaVariant) -> Callable[[Any], Result[Record, DecodeError]]:
    """Bind ``decode_record`` to one schema variant."""
    return partial(decode_record, variant=variant)


def decode_index(raw: Any) -> Result[list[int], DecodeError]:
    """Decode a list of integer identifiers.

    A single non-integer element fails the whole list; nothing is skipped.
    """
    try:
        return Success(_INDEX.validate_python(raw))
    except ValidationError as exc:
        loc = exc.errors()[0].get("loc") or ()
    if not loc:
        return Failure(
            DecodeError(f"Error at: `$` expecting a list but instead got: {_describe(raw)}")
        )
    i = loc[0]
    return Failure(
        DecodeError(
            f"Error at: `$[{i}]` expecting an int but instead got: {raw[i]!r}",
            path=f"$[{i}]",
        )
    )


def decode_json(
    text: str, decoder: Callable[[Any], Result[T, DecodeError]]
) -> Result[T, DecodeError]:
    """Parse ``text`` as JSON, then apply ``decoder`` to the parsed tree."""
    try:
        raw = json.loads(text)
    except (ValueError, RecursionError) as exc:
        # RecursionError: nesting deeper than the interpreter stack allows
        return Failure(DecodeError(f"Given an invalid JSON: {exc}"))
    return decoder(raw)
