"""Конфигурация приложения."""
import os
from functools import lru_cache


@lru_cache
def get_config():
    return type("Config", (), {
        "debug": os.environ.get("DEBUG", "0").lower() in ("1", "true", "yes"),
        "allowed_origins": os.environ.get("ALLOWED_ORIGINS", "*").split(","),
        "broadcast_queue_size": int(os.environ.get("BROADCAST_QUEUE_SIZE", "1024")),
        "log_level": os.environ.get("LOG_LEVEL", "INFO").upper(),
    })()
