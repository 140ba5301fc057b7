from __future__ import annotations

from typing import Any

from vector_store.http_client import post_json


def generate_content(
    endpoint: str,
    api_key: str,
    contents: list[dict[str, Any]],
    generation_config: dict[str, Any],
    timeout: int = 120,
) -> dict[str, Any]:
    """Call Gemini generateContent and return the raw JSON response."""
    payload = {
        "contents": contents,
        "generationConfig": generation_config,
    }
    return post_json(
        endpoint,
        payload,
        headers={"x-goog-api-key": api_key},
        timeout=timeout,
    )


def extract_text(response: Any) -> str:
    """Return candidates[0].content.parts[0].text, or "" if any step is missing."""
    if not isinstance(response, dict):
        return ""
    candidates = response.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    if not isinstance(content, dict):
        return ""
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return ""
    text = parts[0].get("text")
    return text if isinstance(text, str) else ""
