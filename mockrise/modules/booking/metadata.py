"""Mode-specific interview metadata.

The ``metadata`` column holds exactly one variant, selected by its ``type``
tag. The JSON keys are the camelCase names clients already read.
"""

from __future__ import annotations

from typing import Annotated, Literal
from uuid import UUID

from pydantic import Field, TypeAdapter

from mockrise.shared.schemas import CamelModel


class LiveMetadata(CamelModel):
    type: Literal["live_mock_interview"] = "live_mock_interview"
    slot_id: UUID


class AiMetadata(CamelModel):
    type: Literal["ai_powered"] = "ai_powered"
    session_id: str


class PeerMetadata(CamelModel):
    type: Literal["peer_to_peer"] = "peer_to_peer"
    match_status: Literal["pending", "matched"] = "pending"


class FamilyMetadata(CamelModel):
    type: Literal["family_friends"] = "family_friends"


InterviewMetadata = Annotated[
    LiveMetadata | AiMetadata | PeerMetadata | FamilyMetadata,
    Field(discriminator="type"),
]

_METADATA_ADAPTER: TypeAdapter[InterviewMetadata] = TypeAdapter(InterviewMetadata)


def load_metadata(raw: dict | None) -> InterviewMetadata | None:
    if not raw:
        return None
    return _METADATA_ADAPTER.validate_python(raw)


def dump_metadata(metadata: InterviewMetadata) -> dict:
    return metadata.model_dump(mode="json", by_alias=True)


def linked_slot_id(raw: dict | None) -> UUID | None:
    """Return the slot held by a live interview, if any."""
    metadata = load_metadata(raw)
    if isinstance(metadata, LiveMetadata):
        return metadata.slot_id
    return None
