from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT_SECONDS = 5.0

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def _require_name(value: Any) -> str:
    name = str(value or "").strip()
    if not name:
        raise ValueError("Mongo database name is required (MONGO_DB / \"name\")")
    return name


def _parse_port(value: Any) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid port: {value!r}") from exc
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range: {port}")
    return port


@dataclass(frozen=True)
class MongoOptionsConfig:
    """Optional tuning flags. ``None`` means "leave the driver default"."""

    retry_writes: Optional[bool] = None
    write_concern: Optional[str] = None
    replica_set: Optional[str] = None

    def is_empty(self) -> bool:
        return self.retry_writes is None and self.write_concern is None and self.replica_set is None


@dataclass(frozen=True)
class MongoConfig:
    """Connection configuration.

    `password` may come from environment (MONGO_PASS). Do not log it.
    """

    host: str = "127.0.0.1"
    port: int = 27017
    user: str = ""
    password: str = field(default="", repr=False)
    name: str = ""
    options: Optional[MongoOptionsConfig] = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MongoConfig":
        env = os.environ if environ is None else environ

        retry_raw = env.get("MONGO_RETRY_WRITES")
        options = MongoOptionsConfig(
            retry_writes=_parse_bool(retry_raw) if retry_raw else None,
            write_concern=env.get("MONGO_WRITE_CONCERN") or None,
            replica_set=env.get("MONGO_REPLICA_SET") or None,
        )

        return cls(
            host=env.get("MONGO_HOST", "127.0.0.1"),
            port=_parse_port(env.get("MONGO_PORT", "27017")),
            user=env.get("MONGO_USER", ""),
            password=env.get("MONGO_PASS", ""),
            name=_require_name(env.get("MONGO_DB")),
            options=None if options.is_empty() else options,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MongoConfig":
        """Build from the JSON shape used by deployment config files.

        Keys: user, pass, host, port (string or int), name, options{retryWrites,
        writeConcern, replicaSet}.
        """
        raw_options = data.get("options")
        options = None
        if raw_options:
            retry = raw_options.get("retryWrites")
            if retry is not None and not isinstance(retry, bool):
                raise ValueError(f"Invalid retryWrites: {retry!r}")
            options = MongoOptionsConfig(
                retry_writes=retry,
                write_concern=raw_options.get("writeConcern"),
                replica_set=raw_options.get("replicaSet"),
            )

        return cls(
            host=str(data.get("host", "127.0.0.1")),
            port=_parse_port(data.get("port", 27017)),
            user=str(data.get("user", "")),
            password=str(data.get("pass", "")),
            name=_require_name(data.get("name")),
            options=options,
        )


def load_mongo_config(path: Path | str) -> MongoConfig:
    """Load a MongoConfig from a JSON file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return MongoConfig.from_dict(data)


@dataclass(frozen=True)
class MongoConnectionParams:
    """Arguments for ``pymongo.MongoClient(uri, **options)``."""

    uri: str
    options: dict[str, Any] = field(repr=False)


def build_connection_params(
    config: MongoConfig,
    *,
    timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
) -> MongoConnectionParams:
    """Translate static config into driver connection parameters. No I/O."""
    uri = f"mongodb://{config.host}:{config.port}/"
    timeout_ms = int(timeout_seconds * 1000)

    options: dict[str, Any] = {
        "directConnection": True,
        "serverSelectionTimeoutMS": timeout_ms,
        "connectTimeoutMS": timeout_ms,
        "tz_aware": True,
    }

    if config.user:
        options["username"] = config.user
        options["password"] = config.password
        options["authSource"] = config.name or "admin"

    opts = config.options
    if opts is not None:
        if opts.retry_writes is not None:
            options["retryWrites"] = opts.retry_writes

        if opts.write_concern is not None:
            if opts.write_concern == "majority":
                options["w"] = "majority"
            else:
                logger.warning("Ignoring unrecognized write concern %r", opts.write_concern)

        if opts.replica_set is not None:
            options["replicaSet"] = opts.replica_set

    return MongoConnectionParams(uri=uri, options=options)
