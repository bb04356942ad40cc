"""
Pydantic models for records returned by the RSCS scoring backend.

Optional fields default so that partial payloads stay valid; the backend
omits ``content_checksum`` unless it was asked for and may return ``null``
for counts it has not collected yet.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# Fixture data uses integers; the production backend emits agency slugs.
EntityId = Union[int, str]


# ── List rows ─────────────────────────────────────────────────────────────────

class Entity(BaseModel):
    """An agency (or agency-shaped) row from ``GET /agencies``."""
    model_config = ConfigDict(extra="ignore")

    id: EntityId = Field(..., description="Identifier, unique within one collection", examples=[1])
    name: str = Field("", description="Display name", examples=["Department of Agriculture"])
    total_words: int = Field(0, ge=0, description="Words of regulatory text attributed to the row")
    avg_rscs: float | None = Field(
        None, ge=0,
        description="Average RSCS per 1,000 words; 0 is a real score, null means unscored",
    )
    parent_id: EntityId | None = Field(None, description="Identifier of the owning row, if any")
    content_checksum: str | None = Field(None, description="Opaque content digest")
    lsa_counts: int | None = Field(None, ge=0, description="Recent regulatory activity count")

    @field_validator("total_words", mode="before")
    @classmethod
    def _null_words_are_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("parent_id", "content_checksum", mode="before")
    @classmethod
    def _blank_is_none(cls, v: Any) -> Any:
        return None if v == "" else v


# ── Detail records ────────────────────────────────────────────────────────────

class _Detail(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    title: str | None = None
    summary: str = Field("", description="Plain-language summary")

    @field_validator("id", "title", mode="before")
    @classmethod
    def _numbers_as_text(cls, v: Any) -> Any:
        return str(v) if isinstance(v, (int, float)) else v

    @field_validator("summary", mode="before")
    @classmethod
    def _null_summary(cls, v: Any) -> Any:
        return "" if v is None else v


class TitleDetail(_Detail):
    """Response body for ``GET /titles/{t}``."""
    total_words: int | None = Field(None, ge=0, description="Words in the title")
    avg_rscs: float | None = Field(None, ge=0, description="Average RSCS per 1,000 words")


class SectionDetail(_Detail):
    """Response body for ``GET /sections/{id}``."""
    section: str = Field("", description="Section citation", examples=["§ 1.1"])
    text: str = Field("", description="Full regulatory text")
    rscs_per_1k: float | None = Field(None, ge=0, description="RSCS per 1,000 words")

    @field_validator("section", "text", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        return str(v) if isinstance(v, (int, float)) else v


# ── Parsing helpers ───────────────────────────────────────────────────────────

def parse_entities(payload: Any) -> list[Entity]:
    """Validate a list payload, dropping rows that do not fit the model.

    Anything other than a JSON array (including ``None`` for an empty or
    unparseable body) yields an empty collection.
    """
    if not isinstance(payload, list):
        if payload is not None:
            logger.warning("Expected a JSON array of agencies, got %s", type(payload).__name__)
        return []

    entities: list[Entity] = []
    for index, item in enumerate(payload):
        try:
            entities.append(Entity.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping malformed agency row %d: %s", index, exc.errors()[0]["msg"])
    return entities


def parse_detail(model: type[BaseModel], payload: Any) -> BaseModel:
    """Validate a detail payload, falling back to an empty record."""
    if not isinstance(payload, dict):
        return model()
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Malformed %s payload: %s", model.__name__, exc.errors()[0]["msg"])
        return model()
