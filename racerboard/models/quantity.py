"""Shared field types for on-chain quantities."""

from typing import Annotated

from pydantic import Field, PlainSerializer

# uint256 values stay exact ints in-process and go out as decimal strings
Uint = Annotated[
    int,
    Field(ge=0),
    PlainSerializer(lambda v: str(v), return_type=str, when_used="json"),
]
