"""Base class for records persisted in the document store."""

from __future__ import annotations

from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from btcc_fantasy.exceptions import DocumentDecodeError


class Record(BaseModel):
    """Frozen record stored with camelCase field names."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    # Field filled from the document key on read
    id_field: ClassVar[str | None] = None

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any], **extra: Any) -> Self:
        """Decode a stored document, raising DocumentDecodeError on bad data."""
        payload = dict(data)
        payload.update({to_camel(k): v for k, v in extra.items()})
        if cls.id_field:
            payload[to_camel(cls.id_field)] = doc_id
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise DocumentDecodeError(
                f"Failed to decode {cls.__name__} document {doc_id!r}: {exc}",
            ) from exc

    def to_document(self) -> dict[str, Any]:
        """Return the full document body (a full replace, never a merge)."""
        return self.model_dump(by_alias=True, mode="python")
