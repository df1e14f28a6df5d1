import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# ---- history labels ----
MANUAL_SAVE_GAME = "manual-save"
MANUAL_SAVE_DESC = "session save"
ADMIN_ADJUST_GAME = "admin-adjust"
ADMIN_ADJUST_DESC = "admin adjustment"

# ---- error codes -> messages ----
INVALID_USERNAME = "INVALID_USERNAME"
INVALID_GAME = "INVALID_GAME"
INVALID_AMOUNT = "INVALID_AMOUNT"
INVALID_BALANCE = "INVALID_BALANCE"
INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"

MESSAGES = {
    INVALID_USERNAME: "Username is required.",
    INVALID_GAME: "Game name is required.",
    INVALID_BALANCE: "Balance must be a non-negative integer.",
    INSUFFICIENT_FUNDS: "Wager exceeds current balance.",
}


class LedgerError(Exception):
    """A rejected request, rendered as {"ok": false, "error": code, "message": message}."""
    def __init__(self, code: str, message: str | None = None, status_code: int = 400):
        self.code = code
        self.message = message or MESSAGES.get(code, code)
        self.status_code = status_code
        super().__init__(self.message)


# ---- persisted shapes ----
class HistoryEntry(BaseModel):
    ts: str
    game: str
    delta: int
    desc: str = ""

class Player(BaseModel):
    balance: int
    history: list[HistoryEntry] = Field(default_factory=list)

class Ledger(BaseModel):
    players: dict[str, Player] = Field(default_factory=dict)


# ---- input normalization ----
def normalize_username(raw: Any) -> str | None:
    if not isinstance(raw, str):
        return None
    trimmed = raw.strip()
    return trimmed or None

def normalize_game(raw: Any) -> str:
    return raw.strip() if isinstance(raw, str) else ""

def parse_integer(value: Any) -> int | None:
    """
    Floor a JSON number or numeric string to an int.
    Returns None for anything that is not a finite number (bools included).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, (float, str)):
        return None
    if isinstance(value, str) and (not value.strip() or "_" in value):
        return None
    try:
        num = Decimal(value.strip() if isinstance(value, str) else value)
    except InvalidOperation:
        return None
    if not num.is_finite():
        return None
    return int(num.to_integral_value(rounding=ROUND_FLOOR))


# ---- audit ----
def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")

def history_entry(game: str, delta: int, desc: Any = "") -> HistoryEntry:
    text = desc if isinstance(desc, str) and desc.strip() else ""
    return HistoryEntry(ts=utc_timestamp(), game=game, delta=delta, desc=text)
