"""
store.py
Flat-file record store: one category per file, one record per line.
Files are opened, fully read or fully rewritten, and closed inside a single call.
"""

from __future__ import annotations

import math
from contextlib import contextmanager
from pathlib import Path

from loguru import logger

from errors import IOFailure

DELIMITER = ";"

DEFAULT_JUNIOR_RATE = 1000.0
DEFAULT_SENIOR_RATE = 1600.0


@contextmanager
def open_store(path: str | Path, mode: str = "r"):
    path = Path(path)
    try:
        if "w" in mode or "a" in mode:
            path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(path, mode, encoding="utf-8")
    except OSError as exc:
        raise IOFailure(f"Cannot open {path}: {exc}") from exc
    try:
        yield handle
    except OSError as exc:
        raise IOFailure(f"I/O error on {path}: {exc}") from exc
    finally:
        handle.close()


def read_lines(path: str | Path) -> list[str]:
    """Non-blank lines of the store. A missing or unreadable file reads as empty."""
    path = Path(path)
    if not path.exists():
        logger.info(f"Store {path} not found, starting empty")
        return []
    try:
        with open_store(path, "r") as fh:
            return [line.rstrip("\r\n") for line in fh if line.strip()]
    except IOFailure as exc:
        logger.error(f"Error loading {path}: {exc}")
        return []


def write_lines(path: str | Path, lines: list[str]) -> bool:
    """Rewrite the whole store. Failures are logged and reported as False."""
    try:
        with open_store(path, "w") as fh:
            for line in lines:
                fh.write(line)
                fh.write("\n")
    except IOFailure as exc:
        logger.error(f"Error saving {path}: {exc}")
        return False
    return True


def split_record(line: str) -> list[str]:
    return [part.strip() for part in line.split(DELIMITER)]


def join_record(fields) -> str:
    return DELIMITER.join(str(f) for f in fields)


# ---------- Payment rates ----------

def _parse_rate(line: str) -> float:
    # Older files label the values: "Junior Rate: 1000.0"
    if ":" in line:
        line = line.split(":", 1)[1]
    return float(line.strip())


def load_rates(path: str | Path) -> tuple[float, float]:
    lines = read_lines(path)
    rates = [DEFAULT_JUNIOR_RATE, DEFAULT_SENIOR_RATE]
    for index, label in enumerate(("junior", "senior")):
        if index >= len(lines):
            logger.warning(f"No {label} rate in {path}, using default {rates[index]}")
            continue
        try:
            value = _parse_rate(lines[index])
        except ValueError:
            logger.warning(f"Invalid {label} rate '{lines[index]}' in {path}, using default {rates[index]}")
            continue
        if not math.isfinite(value) or value <= 0:
            logger.warning(f"Non-positive or non-finite {label} rate in {path}, using default {rates[index]}")
            continue
        rates[index] = value
    return rates[0], rates[1]


def save_rates(path: str | Path, junior_rate: float, senior_rate: float) -> bool:
    return write_lines(path, [str(float(junior_rate)), str(float(senior_rate))])
