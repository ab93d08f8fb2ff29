import tomllib
import shutil
from pathlib import Path
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".vaultrecall"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

DEFAULT_PAGE_SIZE = 100
DEFAULT_TIMEZONE = "UTC"
DEFAULT_LOG_LEVEL = "INFO"

def load_config() -> Dict[str, Any]:
    """Load config from ~/.vaultrecall/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()  # .env may carry REVIEW_* / LOG_LEVEL overrides
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    review_cfg = config.get("review", {})
    page_size = int(os.getenv("REVIEW_PAGE_SIZE", review_cfg.get("page_size", DEFAULT_PAGE_SIZE)))
    if page_size < 1:
        raise ValueError(f"review.page_size must be positive, got {page_size}")
    timezone_name = os.getenv("REVIEW_TIMEZONE", review_cfg.get("timezone", DEFAULT_TIMEZONE))
    try:
        ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown review.timezone: {timezone_name!r}") from exc
    config["review"] = {
        "page_size": page_size,
        "timezone": timezone_name,
    }

    logging_cfg = config.get("logging", {})
    config["logging"] = {
        "level": os.getenv("LOG_LEVEL", logging_cfg.get("level", DEFAULT_LOG_LEVEL)).upper(),
    }
    return config

def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('review', 'page_size')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value

def get_review_timezone(config: Optional[Dict[str, Any]] = None) -> ZoneInfo:
    """Timezone used for calendar-day scheduling and the dashboard's notion of 'today'."""
    if config is None:
        config = load_config()
    return ZoneInfo(config["review"]["timezone"])
