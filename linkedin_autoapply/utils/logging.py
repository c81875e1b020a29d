"""Logging utilities"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def setup_logging(verbose=False, log_dir=None):
    """Configure the root logger once: console plus an optional dated file"""
    root = logging.getLogger()
    if getattr(root, "_autoapply_configured", False):
        return
    level = logging.DEBUG if verbose else logging.INFO
    root.setLevel(level)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(console)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d")
        file_handler = logging.FileHandler(path / f"autoapply_{stamp}.log", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    root._autoapply_configured = True


def log_result(path, posting, outcome, reason="", steps_completed=0):
    """Append one application result to a JSONL file"""
    result = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "job_id": posting.external_id,
        "job_url": posting.listing_url,
        "title": posting.title,
        "company": posting.company_name,
        "status": outcome.value,
        "steps_completed": steps_completed,
    }
    if reason:
        result["reason"] = reason

    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(result, ensure_ascii=False) + "\n")
