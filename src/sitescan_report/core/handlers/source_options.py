# src/sitescan_report/core/handlers/source_options.py
import argparse
import logging
from pathlib import Path
from typing import Callable, List

from scan_snapshot.model import SiteRecord
from scan_snapshot.services.snapshot_loader_service import SnapshotLoaderService
from sitescan_report.core.managers.config_manager import config_manager
from sitescan_report.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


def add_source_arguments(parser: argparse.ArgumentParser) -> None:
    """Adds the flags that choose where the snapshot comes from."""
    parser.add_argument("--source", choices=["web", "file"], default="web",
                        help="Download the snapshot or read a cached copy (default: web).")
    parser.add_argument("--file", type=Path, default=None,
                        help="Snapshot JSON file for --source file (default: the cache file).")
    parser.add_argument("--url", type=str, default=None, help="Override the snapshot URL.")
    parser.add_argument("--save-cache", action="store_true",
                        help="Keep the downloaded snapshot in the cache file.")


def build_snapshot_loader(parsed_args: argparse.Namespace) -> Callable[[], List[SiteRecord]]:
    """Returns a zero-argument loader built from the (possibly overridden) settings."""
    service = SnapshotLoaderService(
        url=config_manager.get_nested("snapshot.url"),
        timeout=config_manager.get_nested("snapshot.timeout", 120),
        chunk_size=config_manager.get_nested("snapshot.chunk_size", 65536),
        cache_file=PathUtils.get_snapshot_cache_file(config_manager.get_nested("snapshot.cache_file")),
    )

    if parsed_args.source == "file":
        return lambda: service.load_from_file(parsed_args.file)
    return lambda: service.load_from_web(save_cache=parsed_args.save_cache)
