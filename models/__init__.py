from .base import (
    DependencyClass,
    ProcessedCode,
    QueryBaseModel,
    unique_in_order,
)
from .query import ClassifiedQueries, QueryRecord
from .settings import PreprocessorSettings

__all__ = [
    # Base infrastructure
    "QueryBaseModel",
    "DependencyClass",
    "ProcessedCode",
    "unique_in_order",

    # Query models
    "QueryRecord",
    "ClassifiedQueries",

    # Configuration
    "PreprocessorSettings",
]
