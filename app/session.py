"""Client-held session: the bearer token and the last-known profile.

Both values live in a small JSON key/value file under the fixed keys
``token`` and ``user``. A session is restored only when both keys are
present; logging out removes both and leaves any other keys in place.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class SessionState:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.token: str | None = None
        self.user: dict | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("ignoring unreadable session file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        if not data:
            self.path.unlink(missing_ok=True)
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def load(self) -> "SessionState":
        data = self._read()
        token, user = data.get(TOKEN_KEY), data.get(USER_KEY)
        if token and user:
            self.token, self.user = token, user
        return self

    def save(self, token: str, user: dict) -> None:
        self.token, self.user = token, user
        data = self._read()
        data[TOKEN_KEY] = token
        data[USER_KEY] = user
        self._write(data)

    def set_user(self, user: dict) -> None:
        self.user = user
        if self.token:
            self.save(self.token, user)

    def clear(self) -> None:
        self.token, self.user = None, None
        data = self._read()
        data.pop(TOKEN_KEY, None)
        data.pop(USER_KEY, None)
        self._write(data)
