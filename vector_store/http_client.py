import json
from typing import Any, Optional
from urllib import request
from urllib.error import HTTPError, URLError


class HTTPStatusError(RuntimeError):
    """Non-2xx response. Keeps the status and raw body for diagnostics."""

    def __init__(self, url: str, status: int, body: str):
        self.url = url
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status} calling {url}: {body}")


def post_json(
    url: str,
    payload: dict,
    headers: Optional[dict[str, str]] = None,
    timeout: int = 120,
) -> dict[str, Any]:
    """POST a JSON payload and return the decoded JSON response.

    Raises:
        HTTPStatusError: The server answered with a non-2xx status.
        ConnectionError: The server could not be reached.
        ValueError: The response body is not valid JSON.
    """
    data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    all_headers = {"Content-Type": "application/json"}
    if headers:
        all_headers.update(headers)
    req = request.Request(
        url,
        data=data,
        headers=all_headers,
        method="POST",
    )
    try:
        with request.urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8")
            return json.loads(raw)
    except HTTPError as exc:
        body = exc.read().decode("utf-8") if exc.fp else ""
        raise HTTPStatusError(url, exc.code, body) from exc
    except URLError as exc:
        raise ConnectionError(f"Cannot reach {url}: {exc.reason}") from exc
