import os

DEFAULT_STARTING_BALANCE = 1000
DEFAULT_PORT = 3000


def data_file() -> str:
    return os.environ.get("CASINO_DATA_FILE", os.path.join(os.getcwd(), "data", "balances.json"))

def starting_balance() -> int:
    return int(os.environ.get("CASINO_STARTING_BALANCE", DEFAULT_STARTING_BALANCE))

def static_dir() -> str:
    return os.environ.get("CASINO_STATIC_DIR", os.path.join(os.getcwd(), "public"))

def log_dir() -> str:
    return os.environ.get("CASINO_LOG_DIR", os.path.join(os.getcwd(), "logs"))

def log_level() -> str:
    return os.environ.get("CASINO_LOG_LEVEL", "INFO").upper()

def host() -> str:
    return os.environ.get("CASINO_HOST", "0.0.0.0")

def port() -> int:
    return int(os.environ.get("CASINO_PORT", DEFAULT_PORT))
