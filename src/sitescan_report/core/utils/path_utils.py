# src/sitescan_report/core/utils/path_utils.py
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and user paths.
    """

    # --- Package specific paths

    @staticmethod
    def get_report_package_root() -> Path:
        """Returns the directory of the installed 'sitescan_report' package."""
        return Path(__file__).resolve().parent.parent.parent

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_report_package_root() / "settings.json"

    # --- User specific paths ---

    @staticmethod
    def get_cache_root() -> Path:
        """
        Returns the root directory for cached snapshots in the user's home.
        (e.g., ~/.sitescan_report/)
        """
        return Path.home() / ".sitescan_report"

    @staticmethod
    def get_snapshot_cache_file(file_name: Optional[str] = None) -> Path:
        """
        Returns the path of the cached weekly snapshot.
        Relative names resolve against the cache root, absolute ones are kept.
        """
        name = Path(file_name or "weekly-snapshot.json").expanduser()
        if name.is_absolute():
            return name
        return PathUtils.get_cache_root() / name

    # --- Helper methods ---

    @staticmethod
    def ensure_parent_dir(path: Path) -> Path:
        """Creates the parent directory of a file path if it doesn't exist."""
        path.parent.mkdir(parents=True, exist_ok=True)
        return path
