"""Client-side persisted session: the current token and user summary."""

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class Session:
    token: str
    user: dict

    @property
    def username(self) -> str:
        return self.user.get("username", "")


class SessionStore:
    """
    Small key-value file holding the signed-in session.

    Loaded once when the client starts, written after a successful login or
    registration, removed on logout. Nothing here checks token expiry: an
    expired token is discovered when the server rejects it.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[Session]:
        if not self.path.is_file():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return Session(token=data["token"], user=data["user"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return None

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(asdict(session), ensure_ascii=False), encoding="utf-8")
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
