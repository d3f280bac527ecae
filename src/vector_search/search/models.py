"""Search data models."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Union


@dataclass(frozen=True)
class Vector:
    """A concordance paired with its magnitude (Euclidean norm of the counts)."""

    concordance: Mapping[str, int]
    magnitude: float

    def __post_init__(self) -> None:
        if not isinstance(self.concordance, MappingProxyType):
            object.__setattr__(self, "concordance", MappingProxyType(dict(self.concordance)))

    def is_empty(self) -> bool:
        return not self.concordance

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"concordance": dict(self.concordance), "magnitude": self.magnitude}


# Field name -> Vector, in record field order
FieldIndex = Mapping[str, Vector]

Index = Union[Vector, FieldIndex]
