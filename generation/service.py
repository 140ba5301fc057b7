from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from retrieval.config import SEARCH_MODES
from retrieval.service import RetrievalService
from vector_store.exceptions import CompletionError, ValidationError
from vector_store.http_client import HTTPStatusError
from vector_store.models import DocumentRecord, ScoredRecord

from .config import GenerationConfig
from .gemini_client import extract_text, generate_content

logger = logging.getLogger(__name__)

CONTEXT_ROLE = "user"


class CompletionService:
    """
    Retrieval-augmented completion through the Gemini generateContent API.

    Every context record becomes one message, the user's query is always the
    last message, and the result is always plain text.
    """

    def __init__(self, config: GenerationConfig | None = None):
        self.config = config or GenerationConfig.from_env()
        self._last_raw_response: Any = None

    @property
    def last_raw_response(self) -> Any:
        """Raw payload of the most recent API call (diagnostics only)."""
        return self._last_raw_response

    def build_contents(
        self,
        query_text: str,
        context_records: Iterable[Any],
    ) -> list[dict[str, Any]]:
        contents = []
        for item in context_records:
            text = _context_text(item)
            if not text:
                continue
            contents.append({"role": CONTEXT_ROLE, "parts": [{"text": text}]})
        contents.append({"role": "user", "parts": [{"text": query_text}]})
        return contents

    def build_generation_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Defaults overridden key by key (shallow merge)."""
        return {**self.config.default_generation_config(), **(overrides or {})}

    def complete(
        self,
        query_text: str,
        context_records: Iterable[Any],
        generation_config: Optional[dict[str, Any]] = None,
    ) -> str:
        """
        Generate an answer grounded in the given context.

        Raises:
            CompletionError: If the API call fails, or the response has no
                             candidates[0].content.parts[0].text, or it is empty.
        """
        if not self.config.gemini_api_key:
            raise CompletionError("Gemini API key is not configured")

        contents = self.build_contents(query_text, context_records)
        gen_config = self.build_generation_config(generation_config)

        try:
            response = generate_content(
                self.config.completion_endpoint,
                self.config.gemini_api_key,
                contents,
                gen_config,
                timeout=self.config.timeout,
            )
        except HTTPStatusError as e:
            self._last_raw_response = e.body
            logger.error(
                f"Gemini completion API error: HTTP {e.status} {e.body} "
                f"(messages={len(contents)}, generationConfig={gen_config})"
            )
            raise CompletionError(
                "Failed to get completion from Gemini API",
                status_code=e.status,
            ) from e
        except (ConnectionError, ValueError) as e:
            self._last_raw_response = None
            logger.error(f"Gemini completion call failed: {e}")
            raise CompletionError(
                "Failed to get completion from Gemini API",
                details=str(e),
            ) from e

        self._last_raw_response = response
        text = extract_text(response)
        if not text.strip():
            logger.error(f"Invalid Gemini completion API response: {response}")
            raise CompletionError("Invalid Gemini completion API response")
        return text


def _context_text(item: Any) -> str:
    if isinstance(item, ScoredRecord):
        content = item.record.content
    elif isinstance(item, DocumentRecord):
        content = item.content
    elif isinstance(item, Mapping):
        content = item.get("content", "")
    else:
        content = getattr(item, "content", "")

    if content is None:
        return ""
    if isinstance(content, (list, tuple)):
        content = "\n".join(str(part) for part in content)
    return str(content).strip()


@dataclass
class ChatResult:
    answer: str
    context: list[ScoredRecord] = field(default_factory=list)


class ChatService:
    """
    Retrieval followed by a grounded completion.

    `search_mode` pins the chat to "scan" or "native" search; None uses the
    retrieval service's configured mode.
    """

    def __init__(
        self,
        retrieval: RetrievalService,
        completion: CompletionService,
        limit: int = 5,
        threshold: float = 0.7,
        search_mode: Optional[str] = None,
    ):
        if search_mode is not None and search_mode not in SEARCH_MODES:
            raise ValidationError(
                f"Unsupported search mode: {search_mode} (expected one of {SEARCH_MODES})"
            )
        self.retrieval = retrieval
        self.completion = completion
        self.limit = limit
        self.threshold = threshold
        self.search_mode = search_mode

    def chat(
        self,
        query_text: str,
        limit: Optional[int] = None,
        threshold: Optional[float] = None,
        generation_config: Optional[dict[str, Any]] = None,
    ) -> ChatResult:
        limit = limit if limit is not None else self.limit
        threshold = threshold if threshold is not None else self.threshold

        if self.search_mode == "native":
            context = self.retrieval.search_native(query_text, limit=limit, threshold=threshold)
        elif self.search_mode == "scan":
            context = self.retrieval.search_scan(query_text, limit=limit, threshold=threshold)
        else:
            context = self.retrieval.find_similar(query_text, limit=limit, threshold=threshold)
        context = context[:limit]
        logger.info(f"Chat query {query_text!r}: {len(context)} context documents")
        answer = self.completion.complete(query_text, context, generation_config)
        return ChatResult(answer=answer, context=context)
