from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from logging_lib.config import _bool_env, _comma_tuple, _int_env


@dataclass(frozen=True)
class ApiSettings:
    """HTTP surface settings for the API app."""

    env: str = "local"
    db_path: str = "notifications.db"
    trust_proxy_identity: bool = False
    cors_origins: tuple[str, ...] = ("*",)
    host: str = "0.0.0.0"
    port: int = 8080

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ApiSettings":
        source = env if env is not None else os.environ

        return cls(
            env=source.get("APP_ENV", "local"),
            db_path=source.get("NOTIFICATIONS_DB_PATH", "notifications.db"),
            trust_proxy_identity=_bool_env(source.get("API_TRUST_PROXY_IDENTITY"), False),
            cors_origins=_comma_tuple(source.get("API_CORS_ORIGINS"), default=("*",)),
            host=source.get("API_HOST", "0.0.0.0"),
            port=_int_env(source.get("API_PORT"), 8080),
        )
