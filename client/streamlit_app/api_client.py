"""HTTP client for the access-code FastAPI backend."""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import requests

from config import BACKEND_BASE_URL


class APIClient:
    def __init__(self, base_url: str = BACKEND_BASE_URL) -> None:
        self.base_url = base_url.rstrip("/")

    # -------------------- Access --------------------
    def register(self, email: str) -> Dict[str, Any]:
        return self._request("POST", "/api/register", json={"email": email})

    def login(self, code: str) -> Dict[str, Any]:
        return self._request("POST", "/api/login", json={"code": code})

    # -------------------- Profile --------------------
    def get_user(self, code: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/user/{code}")

    def update_user(
        self,
        code: str,
        name: str,
        last_name: str,
        image: Optional[Tuple[str, bytes, str]] = None,
    ) -> Dict[str, Any]:
        """``image`` is a ``(filename, content, mime_type)`` triple as accepted by requests."""
        # (None, value) parts keep the body multipart even without an image
        files: Dict[str, Any] = {"name": (None, name), "last_name": (None, last_name)}
        if image:
            files["image"] = image
        return self._request("PUT", f"/api/user/{code}", files=files, timeout=120)

    # -------------------- Internal helpers --------------------
    def _request(self, method: str, path: str, timeout: int = 30, **kwargs: Any) -> Dict[str, Any]:
        res = requests.request(method, f"{self.base_url}{path}", timeout=timeout, **kwargs)
        try:
            res.raise_for_status()
        except requests.HTTPError as exc:
            detail = f"{method} {path} -> {res.status_code} {res.reason}; body={res.text}"
            raise requests.HTTPError(detail, response=res) from exc
        return res.json() if res.text else {}


def error_message(exc: Exception) -> str:
    """Prefer the backend's ``detail`` field over the raw exception text."""
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            return response.json().get("detail") or str(exc)
        except ValueError:
            pass
    return str(exc)


def get_client(base_url: str | None = None) -> APIClient:
    return APIClient(base_url=base_url or BACKEND_BASE_URL)
