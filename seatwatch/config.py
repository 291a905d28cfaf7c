import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

REPO_ROOT = Path(__file__).resolve().parents[1]
APP_DIR = Path(os.environ.get("SEATWATCH_APP_DIR", REPO_ROOT / "appdata"))
ROSTER_PATH = Path(os.environ.get("SEATWATCH_ROSTER", APP_DIR / "wanda.cinemas.data"))
PROXIES_PATH = Path(os.environ.get("SEATWATCH_PROXIES", APP_DIR / "proxies.json"))
RESULT_DIR = Path(os.environ.get("SEATWATCH_RESULT_DIR", REPO_ROOT / "result"))
LOG_DIR = Path(os.environ.get("SEATWATCH_LOG_DIR", REPO_ROOT / "log"))
STATUS_PATH = RESULT_DIR / "monitor-status.json"

LOG_RETENTION_DAYS = 14

RETRY_BUDGET = int(os.environ.get("RETRY_BUDGET", "20"))
RETRY_BACKOFF_SECONDS = float(os.environ.get("RETRY_BACKOFF_SECONDS", "0"))
RETRY_BACKOFF_MAX_SECONDS = float(os.environ.get("RETRY_BACKOFF_MAX_SECONDS", "300"))

# Updates stop this many seconds later than polling does
FREEZE_MARGIN_SECONDS = 300

RATE_LIMIT_SECONDS = float(os.environ.get("RATE_LIMIT_SECONDS", "1.0"))
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "15"))
WRITE_QUEUE_SIZE = 64

WANDA_TIME_URL = "http://www.wandacinemas.com/trade/time.do"
WANDA_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Accept": "application/json, text/javascript, */*; q=0.01",
    "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
    "X-Requested-With": "XMLHttpRequest",
}


def result_path(day, stop_threshold, result_dir=None):
    """One CSV per run-day and stop threshold, shared by every invocation that day."""
    base = Path(result_dir) if result_dir else RESULT_DIR
    return base / f"wanda.{day.strftime('%Y-%m-%d')}.{stop_threshold}.csv"


def log_path(stop_threshold, log_dir=None):
    """One run log per stop threshold."""
    base = Path(log_dir) if log_dir else LOG_DIR
    return base / f"wanda.{stop_threshold}.log"
