from .preprocessor import QueryPreprocessor

__all__ = ["QueryPreprocessor"]
