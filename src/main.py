from __future__ import annotations

import logging

from shopdesk.cli import run_cli
from shopdesk.config import ConfigError, load_config
from shopdesk.db import Db, DbError
from shopdesk.logging_setup import configure_logging

log = logging.getLogger("shopdesk")


def main() -> int:
    try:
        cfg = load_config("config.toml")
        configure_logging(cfg.log_level, cfg.log_dir)
        db = Db(cfg.db)
        log.info("Starting %s for company %s", cfg.name, cfg.company_id)
        run_cli(db, cfg)
        return 0
    except ConfigError as e:
        print(f"[CONFIG ERROR] {e}")
        return 2
    except DbError as e:
        print(f"[DB ERROR] {e}")
        return 3
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
