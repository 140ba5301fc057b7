"""
Custom Exceptions for the embedding, storage and retrieval pipeline.

Exception Hierarchy:
    RAGError (base)
    ├── ProviderError      embedding generation failed (remote or local model)
    ├── CompletionError    completion API failed or returned no usable text
    ├── RetrievalError     query embedding or the search step failed
    ├── NotFoundError      lookup / update / delete on a missing document_id
    └── ValidationError    malformed caller input (also a ValueError)

Usage:
    from vector_store.exceptions import NotFoundError, RAGError

    try:
        record = service.update_document(document_id, {"content": "..."})
    except NotFoundError as e:
        print(f"Unknown document: {e.document_id}")
    except RAGError as e:
        print(f"Update failed: {e}")
"""

from __future__ import annotations

from typing import Optional


class RAGError(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A pipeline error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


class ProviderError(RAGError):
    """Raised when an embedding provider cannot produce a vector."""

    def __init__(
        self,
        message: str = "Embedding generation failed",
        provider: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.provider = provider
        if provider:
            message = f"{message} [{provider}]"
        super().__init__(message, details)


class CompletionError(RAGError):
    """
    Raised when the completion API fails or its output is unusable.

    Attributes:
        status_code: HTTP status of the failed call, if one was received
    """

    def __init__(
        self,
        message: str = "Completion failed",
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ):
        self.status_code = status_code
        super().__init__(message, details)


class RetrievalError(RAGError):
    """Raised when a similarity search cannot be completed."""


class NotFoundError(RAGError):
    """
    Raised when a document_id does not exist in the store.

    Attributes:
        document_id: The identifier that was looked up
    """

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"Document not found: {document_id}")


class ValidationError(RAGError, ValueError):
    """Raised for malformed caller input (wrong type, out-of-range value)."""
