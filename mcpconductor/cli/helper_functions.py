import json
import logging
import os
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure the root logger for command line use.

    Args:
        level: Level name such as INFO or DEBUG
        log_file: Optional file to mirror log records to
    """
    handlers: list = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def save_results_to_file(results: Dict[str, Any], filename: str, output_dir: str = "output") -> str:
    """
    Save query results to a file.

    Args:
        results: Dictionary of results
        filename: Name of the file to save to
        output_dir: Directory the file is written into

    Returns:
        Path to the saved file
    """
    os.makedirs(output_dir, exist_ok=True)

    file_path = os.path.join(output_dir, filename)

    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(results, f, indent=2, ensure_ascii=False)

    return file_path
