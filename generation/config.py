from dataclasses import dataclass
import os

DEFAULT_COMPLETION_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.5-flash:generateContent"
)


@dataclass
class GenerationConfig:
    gemini_api_key: str = ""
    completion_endpoint: str = DEFAULT_COMPLETION_ENDPOINT
    temperature: float = 0.7
    top_p: float = 0.95
    top_k: int = 40
    max_output_tokens: int = 4024
    timeout: int = 120
    chat_limit: int = 5
    chat_threshold: float = 0.7
    chat_search_mode: str = "native"

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        def _float(name: str, default: float) -> float:
            value = os.environ.get(name)
            return float(value) if value else default

        return cls(
            gemini_api_key=os.environ.get("GEMINI_API_KEY", cls.gemini_api_key),
            completion_endpoint=os.environ.get("GEMINI_QUERY_ENDPOINT", cls.completion_endpoint),
            temperature=_float("GENERATION_TEMPERATURE", cls.temperature),
            top_p=_float("GENERATION_TOP_P", cls.top_p),
            top_k=_int("GENERATION_TOP_K", cls.top_k),
            max_output_tokens=_int("GENERATION_MAX_OUTPUT_TOKENS", cls.max_output_tokens),
            timeout=_int("GENERATION_TIMEOUT", cls.timeout),
            chat_limit=_int("CHAT_LIMIT", cls.chat_limit),
            chat_threshold=_float("CHAT_THRESHOLD", cls.chat_threshold),
            chat_search_mode=os.environ.get("CHAT_SEARCH_MODE", cls.chat_search_mode),
        )

    def default_generation_config(self) -> dict:
        return {
            "temperature": self.temperature,
            "topP": self.top_p,
            "topK": self.top_k,
            "maxOutputTokens": self.max_output_tokens,
        }
