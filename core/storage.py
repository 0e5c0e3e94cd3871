from __future__ import annotations

import os
from typing import Optional


def ensure_dirs(log_file: Optional[str] = None) -> None:
    log_dir = os.path.dirname(log_file) if log_file else os.path.join("data", "logs")
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
