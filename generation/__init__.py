"""
Generation component for RAG pipelines.

Uses retrieved documents as context and the Gemini generateContent API to
produce a plain-text answer.
"""

__version__ = "1.0.0"

from .config import GenerationConfig
from .models import ChatRequest, ChatResponse, ChatSource
from .service import ChatResult, ChatService, CompletionService

__all__ = [
    "__version__",
    "GenerationConfig",
    "CompletionService",
    "ChatService",
    "ChatResult",
    "ChatRequest",
    "ChatResponse",
    "ChatSource",
]
