from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DbConfig:
    host: str
    port: int
    name: str
    user: str
    password: str
    sslmode: str = "require"
    connect_timeout: int = 5
    statement_timeout_ms: int = 5000


@dataclass(frozen=True)
class BusinessConfig:
    timezone: str = "Asia/Bangkok"
    export_prefix: str = "IMOTOR_Report"
    currency: str = "THB"


@dataclass(frozen=True)
class LineConfig:
    enabled: bool = False
    access_token: str = ""
    group_id: str = ""
    endpoint: str = "https://api.line.me/v2/bot/message/push"


@dataclass(frozen=True)
class AppConfig:
    name: str
    log_level: str
    log_dir: Path
    company_id: str
    db: DbConfig
    business: BusinessConfig
    line: LineConfig


def load_config(path: str | Path) -> AppConfig:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {p.resolve()}")

    try:
        data = tomllib.loads(p.read_text(encoding="utf-8"))
    except Exception as e:
        raise ConfigError(f"Failed to read config TOML: {e}") from e

    return parse_config(data)


def parse_config(data: dict) -> AppConfig:
    try:
        app = data["app"]
        db = data["db"]
        business = data.get("business", {})
        line = data.get("line", {})
        return AppConfig(
            name=str(app.get("name", "ShopDesk")),
            log_level=str(app.get("log_level", "INFO")).upper(),
            log_dir=Path(app.get("log_dir", "logs")),
            company_id=str(app["company_id"]),
            db=DbConfig(
                host=str(db["host"]),
                port=int(db.get("port", 5432)),
                name=str(db.get("name", "postgres")),
                user=str(db["user"]),
                password=str(db["password"]),
                sslmode=str(db.get("sslmode", "require")),
                connect_timeout=int(db.get("connect_timeout", 5)),
                statement_timeout_ms=int(db.get("statement_timeout_ms", 5000)),
            ),
            business=BusinessConfig(
                timezone=str(business.get("timezone", "Asia/Bangkok")),
                export_prefix=str(business.get("export_prefix", "IMOTOR_Report")),
                currency=str(business.get("currency", "THB")),
            ),
            line=LineConfig(
                enabled=bool(line.get("enabled", False)),
                access_token=str(line.get("access_token", "")),
                group_id=str(line.get("group_id", "")),
                endpoint=str(line.get("endpoint", "https://api.line.me/v2/bot/message/push")),
            ),
        )
    except KeyError as e:
        raise ConfigError(f"Missing config key: {e}") from e
    except Exception as e:
        raise ConfigError(f"Invalid config values: {e}") from e
