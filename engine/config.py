"""Settings for the front end, read from the environment (and a ``.env`` file)."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

TREND_PERIODS = (3, 6, 12)

SEED_PATH = Path(os.getenv("FINTRACK_SEED_PATH", _PROJECT_ROOT / "data" / "seed.json"))
USER_ID = os.getenv("FINTRACK_USER_ID", "demo-user")
TREND_MONTHS = int(os.getenv("FINTRACK_TREND_MONTHS", "6"))
CURRENCY = os.getenv("FINTRACK_CURRENCY", "$")
LOG_LEVEL = os.getenv("FINTRACK_LOG_LEVEL", "INFO").upper()

if TREND_MONTHS not in TREND_PERIODS:
    raise ValueError(f"FINTRACK_TREND_MONTHS must be one of {TREND_PERIODS}, got {TREND_MONTHS}")


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, level, logging.INFO),
    )
