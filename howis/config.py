import os
import logging
from pathlib import Path
from typing import Optional

try:
	from dotenv import load_dotenv
except ImportError:
	logging.warning("python-dotenv not available; using environment variables only")
else:
	loaded = load_dotenv()
	if not loaded and Path(".env").exists():
		raise RuntimeError(".env file present but failed to load")

VERSION = "0.1.0"
DEFAULT_RECORD_FILE = "howis.txt"
DEFAULT_CHUNK_SIZE = 16384
DEFAULT_MAX_REDIRECTS = 30


def get_str_env(name: str, default: str) -> str:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	return raw


def get_int_env(name: str, default: int) -> int:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return int(raw)
	except Exception:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_optional_float_env(name: str) -> Optional[float]:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return None
	try:
		return float(raw)
	except Exception:
		logging.exception("Invalid %s: %r", name, raw)
		return None


def log_level() -> str:
	return (os.getenv("HOWIS_LOG_LEVEL", "WARNING") or "WARNING").strip().upper()
