import os, json, logging

from pydantic import ValidationError

from . import config
from .domain import HistoryEntry, Ledger, Player

log = logging.getLogger("store")

_ledger: Ledger | None = None

def reset_store():
    """Drop the cached ledger so the next access reloads from the current data file."""
    global _ledger
    _ledger = None

def _ensure_parent_dir(path: str):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

def load_ledger(path: str) -> Ledger:
    """
    Read the ledger file. A missing, empty or malformed file yields an empty ledger;
    everything but the missing case is logged.
    """
    if not os.path.exists(path):
        return Ledger()
    try:
        with open(path, encoding="utf-8") as fh:
            contents = fh.read()
        if not contents.strip():
            return Ledger()
        raw = json.loads(contents)
        if not isinstance(raw, dict) or not isinstance(raw.get("players"), dict):
            log.error("Ledger file %s has no players object; starting empty", path)
            return Ledger()
        return Ledger.model_validate(raw)
    except (OSError, ValueError, ValidationError) as e:
        log.error("Failed to load ledger file %s: %s", path, e)
        return Ledger()

def init_store() -> Ledger:
    global _ledger
    path = config.data_file()
    _ledger = load_ledger(path)
    log.info("Ledger loaded from %s (%d players)", path, len(_ledger.players))
    return _ledger

def ledger() -> Ledger:
    if _ledger is None:
        return init_store()
    return _ledger

def save():
    """Rewrite the whole ledger file."""
    path = config.data_file()
    _ensure_parent_dir(path)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(ledger().model_dump_json(indent=2))

def truncate_all():
    ledger().players.clear()
    save()


def get_or_create_player(username: str) -> Player:
    players = ledger().players
    player = players.get(username)
    if player is None:
        player = Player(balance=config.starting_balance())
        players[username] = player
        try:
            save()
        except OSError:
            del players[username]
            raise
        log.info("store.create username=%s balance=%s", username, player.balance)
    return player

def list_players() -> list[tuple[str, Player]]:
    return list(ledger().players.items())

def delete_player(username: str) -> bool:
    players = ledger().players
    if username not in players:
        return False
    snapshot = dict(players)
    del players[username]
    try:
        save()
    except OSError:
        players.clear()
        players.update(snapshot)
        raise
    log.info("store.delete username=%s", username)
    return True

def record(player: Player, balance: int, entry: HistoryEntry):
    """Set the balance, append the audit entry and save; undone in memory if the write fails."""
    prev_balance, prev_len = player.balance, len(player.history)
    player.balance = balance
    player.history.append(entry)
    try:
        save()
    except OSError:
        player.balance = prev_balance
        del player.history[prev_len:]
        log.error("store.save failed; reverted balance to %s", prev_balance)
        raise
