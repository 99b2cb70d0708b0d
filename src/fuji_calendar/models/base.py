"""Shared base for models that travel over the REST API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model serialized with camelCase keys on the wire.

    Python code uses snake_case attribute names; JSON uses camelCase
    (``subType``, ``qualityScore``). Both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json_dict(self) -> dict:
        """Dump to a JSON-compatible dict with wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)
