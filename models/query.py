from typing import Dict, List

from pydantic import Field, field_validator

from .base import DependencyClass, QueryBaseModel, unique_in_order


class QueryRecord(QueryBaseModel):
    id: str = Field(..., description="Query identifier as written in the page")
    compiled_query_string: str = Field(
        ..., description="Compiled query text, possibly with ${...} markers"
    )
    inline: bool = Field(
        default=False, description="Query is rendered inline rather than as a block"
    )


class ClassifiedQueries(QueryBaseModel):
    """Dependency classification of the queries of one document.

    All id lists follow the insertion order of ``queries`` so generated
    code is stable between builds.
    """

    queries: Dict[str, str] = Field(
        default_factory=dict, description="Query id -> compiled query text"
    )
    valid_ids: List[str] = Field(default_factory=list)
    reactive_ids: List[str] = Field(default_factory=list)
    static_ids: List[str] = Field(default_factory=list)
    input_ids: List[str] = Field(default_factory=list)
    rejected_ids: List[str] = Field(
        default_factory=list,
        description="Ids excluded from code generation (bad pattern or reserved)",
    )

    @field_validator("valid_ids", "reactive_ids", "static_ids", "input_ids", "rejected_ids")
    @classmethod
    def validate_unique(cls, v: List[str]) -> List[str]:
        return unique_in_order(v)

    @property
    def is_empty(self) -> bool:
        return not self.valid_ids

    def classes_for(self, query_id: str) -> List[DependencyClass]:
        """Return every dependency class the given id belongs to"""
        classes: List[DependencyClass] = []
        if query_id in self.static_ids:
            classes.append(DependencyClass.STATIC)
        if query_id in self.reactive_ids:
            classes.append(DependencyClass.REACTIVE)
        if query_id in self.input_ids:
            classes.append(DependencyClass.INPUT_REACTIVE)
        return classes

    def query_text(self, query_id: str) -> str:
        return self.queries[query_id]
