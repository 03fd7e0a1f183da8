from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from importlib import resources
from typing import Iterator

import psycopg
from psycopg import Connection

from .config import DbConfig

log = logging.getLogger(__name__)

SCHEMA_RESOURCE = "sql/schema.sql"


class DbError(Exception):
    pass


def schema_script() -> str:
    """SQL that creates (or repairs) every table the app reads and writes."""
    return resources.files("shopdesk").joinpath(SCHEMA_RESOURCE).read_text(encoding="utf-8")


@dataclass(frozen=True)
class Db:
    cfg: DbConfig

    def connect(self) -> Connection:
        cfg = self.cfg
        try:
            # autocommit: reads never leave an idle transaction open on the pooler
            return psycopg.connect(
                host=cfg.host,
                port=cfg.port,
                dbname=cfg.name,
                user=cfg.user,
                password=cfg.password,
                sslmode=cfg.sslmode,
                connect_timeout=cfg.connect_timeout,
                options=f"-c statement_timeout={cfg.statement_timeout_ms}",
                autocommit=True,
            )
        except psycopg.Error as e:
            log.error("Connection to %s:%s/%s failed: %s", cfg.host, cfg.port, cfg.name, e)
            raise DbError(
                f"Cannot reach the database at {cfg.host}:{cfg.port}. Check config.toml [db]."
            ) from e

    @contextmanager
    def session(self) -> Iterator[Connection]:
        conn = self.connect()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Connection whose statements commit together when the block exits cleanly."""
        with self.session() as conn:
            with conn.transaction():
                yield conn
