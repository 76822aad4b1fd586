from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field


class DependencyClass(str, Enum):
    STATIC = "static"
    REACTIVE = "reactive"
    INPUT_REACTIVE = "input_reactive"


class QueryBaseModel(BaseModel):
    metadata: Dict[str, Any] = Field(
        default_factory=dict, description="Additional metadata"
    )

    class Config:
        validate_assignment = True


class ProcessedCode(BaseModel):
    """Replacement text returned by a preprocessing phase"""

    code: str = Field(..., description="Replacement document or script text")


def unique_in_order(items: List[str]) -> List[str]:
    seen = set()
    ordered = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered
