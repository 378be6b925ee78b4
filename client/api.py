"""HTTP client for the File Storage API."""

import logging
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import unquote

import httpx

logger = logging.getLogger(__name__)

FILENAME_STAR = re.compile(r"filename\*\s*=\s*(?P<charset>[\w-]+)''(?P<value>[^;]+)", re.IGNORECASE)
FILENAME_PLAIN = re.compile(r'filename\s*=\s*"?(?P<value>[^";]+)"?', re.IGNORECASE)


class ApiError(Exception):
    """A request that the server answered with an error, or that never reached it."""

    def __init__(self, message: Optional[str], status_code: Optional[int] = None):
        super().__init__(message or f"HTTP {status_code}")
        self.message = message
        self.status_code = status_code


@dataclass
class AuthResult:
    token: str
    user: dict
    message: str


def filename_from_content_disposition(header: Optional[str]) -> Optional[str]:
    """Suggested save name from a ``Content-Disposition`` header, preferring ``filename*``."""
    if not header:
        return None
    match = FILENAME_STAR.search(header)
    if match:
        return unquote(match.group("value").strip(), encoding=match.group("charset"))
    match = FILENAME_PLAIN.search(header)
    if match:
        return match.group("value").strip()
    return None


class FileStorageClient:
    """
    Thin wrapper over the REST API.

    Once a token is set, every request carries it as a bearer credential.

    :ivar base_url: Server root, e.g. ``http://localhost:3001``.
    :type base_url: str
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._http = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)
        self.token = None
        self.set_token(token)

    def set_token(self, token: Optional[str]) -> None:
        self.token = token
        if token:
            self._http.headers["Authorization"] = f"Bearer {token}"
        else:
            self._http.headers.pop("Authorization", None)

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.debug("Request %s %s failed: %s", method, url, e)
            raise ApiError(None) from e

        if response.is_error:
            message = None
            try:
                body = response.json()
                if isinstance(body, dict):
                    message = body.get("error")
            except ValueError:
                pass
            raise ApiError(message, response.status_code)
        return response

    def _authenticate(self, path: str, payload: dict) -> AuthResult:
        data = self._request("POST", path, json=payload).json()
        self.set_token(data["token"])
        return AuthResult(token=data["token"], user=data["user"], message=data.get("message", ""))

    def health(self) -> dict:
        return self._request("GET", "/api/health").json()

    def register(self, username: str, email: str, password: str) -> AuthResult:
        return self._authenticate(
            "/api/auth/register", {"username": username, "email": email, "password": password}
        )

    def login(self, username: str, password: str) -> AuthResult:
        return self._authenticate("/api/auth/login", {"username": username, "password": password})

    def list_files(self) -> list[dict]:
        return self._request("GET", "/api/files").json()["files"]

    def upload(self, path: Path) -> dict:
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        with open(path, "rb") as fh:
            response = self._request(
                "POST", "/api/files/upload", files={"file": (path.name, fh, content_type)}
            )
        return response.json()["file"]

    def download(self, file_id: int, destination: Path, fallback_name: Optional[str] = None) -> Path:
        """Save a file into ``destination`` under the name the server suggests."""
        response = self._request("GET", f"/api/files/{file_id}/download")
        name = filename_from_content_disposition(response.headers.get("content-disposition"))
        name = Path(name or fallback_name or f"file-{file_id}").name

        destination = Path(destination)
        destination.mkdir(parents=True, exist_ok=True)
        target = destination / name
        target.write_bytes(response.content)
        return target

    def delete_file(self, file_id: int) -> str:
        return self._request("DELETE", f"/api/files/{file_id}").json().get("message", "")
