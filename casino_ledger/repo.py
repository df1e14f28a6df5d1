import logging
from typing import Any

from . import store
from .domain import (
    ADMIN_ADJUST_DESC,
    ADMIN_ADJUST_GAME,
    INSUFFICIENT_FUNDS,
    INVALID_USERNAME,
    MANUAL_SAVE_DESC,
    MANUAL_SAVE_GAME,
    LedgerError,
    Player,
    history_entry,
    normalize_username,
)

log = logging.getLogger("repo")

def require_username(raw: Any) -> str:
    username = normalize_username(raw)
    if username is None:
        raise LedgerError(INVALID_USERNAME)
    return username

def get_profile(username: str) -> Player:
    return store.get_or_create_player(username)

def save_profile(username: str, balance: int) -> int:
    player = store.get_or_create_player(username)
    store.record(player, balance, history_entry(MANUAL_SAVE_GAME, 0, MANUAL_SAVE_DESC))
    log.info("save_profile username=%s balance=%s", username, balance)
    return player.balance

def charge(username: str, game: str, amount: int, desc: str = "") -> int:
    player = store.get_or_create_player(username)
    if player.balance - amount < 0:
        log.info("charge insufficient username=%s amount=%s balance=%s", username, amount, player.balance)
        raise LedgerError(INSUFFICIENT_FUNDS)
    store.record(player, player.balance - amount, history_entry(game, -amount, desc or f"{game} charge"))
    log.info("charge username=%s game=%s amount=%s new_balance=%s", username, game, amount, player.balance)
    return player.balance

def payout(username: str, game: str, amount: int, desc: str = "") -> int:
    player = store.get_or_create_player(username)
    store.record(player, player.balance + amount, history_entry(game, amount, desc or f"{game} payout"))
    log.info("payout username=%s game=%s amount=%s new_balance=%s", username, game, amount, player.balance)
    return player.balance

def list_users() -> list[dict]:
    return [{"username": name, "balance": p.balance} for name, p in store.list_players()]

def user_detail(username: str) -> Player:
    return store.get_or_create_player(username)

def set_balance(username: str, balance: int, note: str | None = None) -> int:
    player = store.get_or_create_player(username)
    delta = balance - player.balance
    store.record(player, balance, history_entry(ADMIN_ADJUST_GAME, delta, note or ADMIN_ADJUST_DESC))
    log.info("set_balance username=%s balance=%s delta=%s", username, balance, delta)
    return player.balance

def delete_user(username: str) -> None:
    if not store.delete_player(username):
        log.info("delete_user: %s not found", username)
