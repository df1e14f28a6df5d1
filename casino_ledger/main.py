import logging

import uvicorn

from . import config
from .logger_config import setup_logging

log = logging.getLogger("main")


def main():
    setup_logging()
    host, port = config.host(), config.port()
    log.info("Casino ledger listening on %s:%s", host, port)
    uvicorn.run("casino_ledger.app:app", host=host, port=port)


if __name__ == "__main__":
    main()
