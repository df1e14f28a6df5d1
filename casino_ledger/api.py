
import logging
from typing import Any, ClassVar

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from . import repo
from .domain import (
    INVALID_AMOUNT,
    INVALID_BALANCE,
    INVALID_GAME,
    INVALID_USERNAME,
    MESSAGES,
    normalize_game,
    normalize_username,
    parse_integer,
)

log = logging.getLogger("api")
router = APIRouter()

def rejected(code: str, message: str | None = None) -> PydanticCustomError:
    return PydanticCustomError(code, message or MESSAGES[code])


# ---- request bodies ----
# Fields are loosely typed and default to None so that a missing field reports the
# same error code as a malformed one.
class UsernameBody(BaseModel):
    username: Any = Field(default=None, validate_default=True)

    @field_validator("username")
    @classmethod
    def _username(cls, v):
        name = normalize_username(v)
        if name is None:
            raise rejected(INVALID_USERNAME)
        return name

class BalanceBody(UsernameBody):
    balance: Any = Field(default=None, validate_default=True)

    @field_validator("balance")
    @classmethod
    def _non_negative(cls, v):
        n = parse_integer(v)
        if n is None or n < 0:
            raise rejected(INVALID_BALANCE)
        return n

class AdminBalanceBody(BalanceBody):
    note: Any = None

    @field_validator("note")
    @classmethod
    def _note(cls, v):
        if isinstance(v, str) and v.strip():
            return v.strip()
        return None

class GameBody(UsernameBody):
    amount_label: ClassVar[str] = "Game"

    game: Any = Field(default=None, validate_default=True)
    amount: Any = Field(default=None, validate_default=True)
    desc: Any = ""

    @field_validator("game")
    @classmethod
    def _game(cls, v):
        game = normalize_game(v)
        if not game:
            raise rejected(INVALID_GAME)
        return game

    @field_validator("amount")
    @classmethod
    def _positive(cls, v):
        n = parse_integer(v)
        if n is None or n <= 0:
            raise rejected(INVALID_AMOUNT, f"{cls.amount_label} amount must be a positive integer.")
        return n

    @field_validator("desc")
    @classmethod
    def _desc(cls, v):
        return v if isinstance(v, str) else ""

class ChargeBody(GameBody):
    amount_label: ClassVar[str] = "Charge"

class PayoutBody(GameBody):
    amount_label: ClassVar[str] = "Payout"


@router.get("/health")
def health():
    return {"status": "ok"}


# ---- player ----
@router.get("/api/profile")
def get_profile(username: str | None = Query(default=None)):
    name = repo.require_username(username)
    player = repo.get_profile(name)
    return {"ok": True, "username": name, "balance": player.balance}

@router.post("/api/profile/save")
def save_profile(body: BalanceBody):
    repo.save_profile(body.username, body.balance)
    return {"ok": True}

@router.post("/api/game/charge")
def charge(body: ChargeBody):
    bal = repo.charge(body.username, body.game, body.amount, body.desc)
    return {"ok": True, "balance": bal}

@router.post("/api/game/payout")
def payout(body: PayoutBody):
    bal = repo.payout(body.username, body.game, body.amount, body.desc)
    return {"ok": True, "balance": bal}


# ---- admin ----
@router.get("/api/admin/users")
def admin_users():
    return {"ok": True, "users": repo.list_users()}

@router.get("/api/admin/user-detail")
def admin_user_detail(username: str | None = Query(default=None)):
    name = repo.require_username(username)
    player = repo.user_detail(name)
    return {
        "ok": True,
        "username": name,
        "balance": player.balance,
        "history": [entry.model_dump() for entry in player.history],
    }

@router.post("/api/admin/set-balance")
def admin_set_balance(body: AdminBalanceBody):
    bal = repo.set_balance(body.username, body.balance, body.note)
    log.info("admin set-balance username=%s -> %s", body.username, bal)
    return {"ok": True, "balance": bal}

@router.post("/api/admin/delete-user")
def admin_delete_user(body: UsernameBody):
    repo.delete_user(body.username)
    log.info("admin delete-user username=%s", body.username)
    return {"ok": True}
