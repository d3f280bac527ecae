"""Domain models for search results.

Value objects are immutable (frozen=True) so ranked results cannot drift from
the scores that produced them.
"""

from pydantic import BaseModel, ConfigDict, Field


class SearchResult(BaseModel):
    """A single ranked match.

    document_position indexes into the engine's document store at search time.
    field_key is set only when the match came from a record field.
    """

    model_config = ConfigDict(frozen=True)

    document_position: int = Field(ge=0)
    score: float = Field(gt=0)
    field_key: str | None = None
