"""Developer tools for the TeamCity DSL."""

from .testing import document_from_json, documents_to_json, element_from_json

__all__ = [
    "document_from_json",
    "documents_to_json",
    "element_from_json",
]
