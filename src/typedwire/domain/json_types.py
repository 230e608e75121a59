"""Type aliases for the JSON-representable envelope domain."""

from __future__ import annotations

from typing import TypeAlias

JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]
JSONArray: TypeAlias = list[JSONValue]

# An envelope is always a JSON object with a type field and, for most
# tags, a value field.
Envelope: TypeAlias = JSONObject
