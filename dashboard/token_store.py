from __future__ import annotations

import os
import json
import tempfile
from typing import Dict, Optional

from dashboard.config import TOKEN_SLOT, dlog, elog
from dashboard.errors import EmptyTokenError


class TokenStore:
    """Holds the current bearer token in memory and in one persisted slot.

    The slot lives in a small JSON object file keyed by ``TOKEN_SLOT``. With no
    path configured the token is kept in memory only.
    """

    def __init__(self, path: Optional[str] = None, slot: str = TOKEN_SLOT) -> None:
        self.path = path
        self.slot = slot
        self.token: Optional[str] = None

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    def submit(self, raw: Optional[str]) -> str:
        token = raw.strip() if isinstance(raw, str) else ""
        if not token:
            raise EmptyTokenError()
        self.token = token
        slots = self._read_slots()
        slots[self.slot] = token
        self._write_slots(slots)
        return token

    def clear(self) -> None:
        self.token = None
        slots = self._read_slots()
        if self.slot in slots:
            del slots[self.slot]
            self._write_slots(slots)

    def restore(self) -> Optional[str]:
        """Load the persisted token, if any, and make it current."""
        value = self._read_slots().get(self.slot)
        if isinstance(value, str) and value.strip():
            self.token = value.strip()
            dlog("token_restored", {"path": self.path})
            return self.token
        return None

    # ---------- persistence helpers ----------
    def _read_slots(self) -> Dict[str, str]:
        if not self.path or not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                raw = json.load(f)
        except Exception as e:
            elog("token_load_error", f"Could not read token file: {e}")
            return {}
        if not isinstance(raw, dict):
            dlog("token_load_skip", "Token file is not a JSON object")
            return {}
        return raw

    def _write_slots(self, slots: Dict[str, str]) -> None:
        if not self.path:
            return
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with tempfile.NamedTemporaryFile("w", delete=False, dir=os.path.dirname(self.path) or ".") as tmp:
                json.dump(slots, tmp)
                tmp.flush()
                os.fsync(tmp.fileno())
                temp_name = tmp.name
            os.replace(temp_name, self.path)
        except Exception as e:
            elog("token_save_error", str(e))
