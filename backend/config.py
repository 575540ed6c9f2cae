"""Runtime settings read from the environment (and `.env`, via python-dotenv).

    DATA_DIR          storage directory            (default: ./data)
    PRESETS_DIR       built-in templates directory (default: ./presets)
    PARTY_HOST_URL    party server base URL; empty disables the handoff
                                                   (default: http://localhost:1999)
    HANDOFF_TIMEOUT   seconds to wait for the party server (default: 5)
    LOG_LEVEL         level for the party_kit and backend loggers (default: INFO)
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

from party_kit.realtime import HttpRealtimeHost, NullRealtimeHost, RealtimeHost

ROOT = Path(__file__).parent.parent

load_dotenv(ROOT / ".env")


class Settings(BaseModel):
    data_dir: Path = ROOT / "data"
    presets_dir: Path = ROOT / "presets"
    party_host_url: str = "http://localhost:1999"
    handoff_timeout: float = 5.0
    log_level: str = "INFO"

    def realtime_host(self) -> RealtimeHost:
        if not self.party_host_url:
            return NullRealtimeHost()
        return HttpRealtimeHost(self.party_host_url, timeout=self.handoff_timeout)


def load_settings() -> Settings:
    defaults = Settings()
    return Settings(
        data_dir=Path(os.getenv("DATA_DIR", str(defaults.data_dir))),
        presets_dir=Path(os.getenv("PRESETS_DIR", str(defaults.presets_dir))),
        party_host_url=os.getenv("PARTY_HOST_URL", defaults.party_host_url),
        handoff_timeout=float(os.getenv("HANDOFF_TIMEOUT", defaults.handoff_timeout)),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level),
    )


def configure_logging(level: str) -> None:
    for name in ("party_kit", "backend"):
        logging.getLogger(name).setLevel(level.upper())
