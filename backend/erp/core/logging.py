"""Centralized logging setup using loguru."""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from erp.core.config import settings


def _is_posting_record(record) -> bool:
    return record["name"] == "erp.services.vouchers"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure loguru sinks.

    stderr and ``LOG_FILE`` get everything at ``level`` (default
    ``LOG_LEVEL``). Voucher postings, deletions and rejections are also
    written to ``postings.log`` next to ``LOG_FILE``.
    """
    level = level or settings.LOG_LEVEL
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )
    logger.add(
        settings.LOG_FILE,
        level=level,
        rotation="10 MB",
        retention="30 days",
        compression="zip",
    )
    logger.add(
        Path(settings.LOG_FILE).with_name("postings.log"),
        level="INFO",
        filter=_is_posting_record,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}",
        rotation="10 MB",
        retention="90 days",
    )
