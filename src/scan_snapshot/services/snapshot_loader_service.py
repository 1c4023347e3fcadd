# src/scan_snapshot/services/snapshot_loader_service.py
import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import requests
from pydantic import TypeAdapter, ValidationError
from tqdm.auto import tqdm

from scan_snapshot.model import SiteRecord
from sitescan_report.core.errors import LoadError

logger = logging.getLogger(__name__)

_RECORDS_ADAPTER = TypeAdapter(List[SiteRecord])


class SnapshotLoaderService:
    """
    Retrieves the weekly site-scanning snapshot, either from the public
    endpoint or from a locally cached copy, and turns it into SiteRecords.

    Every failure (network, HTTP status, unreadable file, bad JSON, invalid
    records) surfaces as a LoadError.
    """

    def __init__(self, url: str, timeout: float = 120, chunk_size: int = 65536,
                 cache_file: Optional[Path] = None):
        self.url = url
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.cache_file = cache_file

    # --- Sources ---

    def load_from_web(self, save_cache: bool = False) -> List[SiteRecord]:
        """Downloads the snapshot and optionally keeps a copy in the cache file."""
        logger.info("Downloading snapshot from %s", self.url)
        try:
            with requests.get(self.url, stream=True, timeout=self.timeout) as resp:
                resp.raise_for_status()
                total = int(resp.headers.get("Content-Length", 0)) or None
                chunks = []
                with tqdm(total=total, unit="B", unit_scale=True, desc="snapshot", leave=False) as bar:
                    for chunk in resp.iter_content(chunk_size=self.chunk_size):
                        chunks.append(chunk)
                        bar.update(len(chunk))
        except requests.RequestException as e:
            raise LoadError(f"Could not download snapshot from {self.url}: {e}") from e

        raw = b"".join(chunks)
        logger.info("Downloaded %d bytes.", len(raw))

        if save_cache:
            self._write_cache(raw)

        return self.parse_records(self._decode(raw, self.url))

    def load_from_file(self, path: Optional[Path] = None) -> List[SiteRecord]:
        """Reads a previously cached snapshot file."""
        path = Path(path) if path else self.cache_file
        if path is None:
            raise LoadError("No snapshot file given and no cache file configured.")

        logger.info("Reading snapshot from %s", path)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise LoadError(f"Could not read snapshot file {path}: {e}") from e

        return self.parse_records(self._decode(raw, str(path)))

    # --- Parsing ---

    @staticmethod
    def parse_records(payload: Any) -> List[SiteRecord]:
        """
        Validates a decoded JSON payload into SiteRecords.
        Accepts a bare array or an object wrapping it under 'items'.
        """
        if isinstance(payload, dict) and isinstance(payload.get("items"), list):
            payload = payload["items"]
        if not isinstance(payload, list):
            raise LoadError(
                f"Snapshot must be a JSON array of records, got {type(payload).__name__}."
            )
        try:
            records = _RECORDS_ADAPTER.validate_python(payload)
        except ValidationError as e:
            raise LoadError(f"Snapshot contains invalid records: {e.error_count()} error(s).\n{e}") from e

        logger.info("Parsed %d records from snapshot.", len(records))
        return records

    @staticmethod
    def _decode(raw: bytes, source: str) -> Any:
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise LoadError(f"Snapshot from {source} is not valid JSON: {e}") from e

    def _write_cache(self, raw: bytes) -> None:
        if self.cache_file is None:
            logger.warning("save_cache requested but no cache file is configured.")
            return
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            self.cache_file.write_bytes(raw)
            logger.info("Snapshot cached at %s", self.cache_file)
        except OSError as e:
            # The download itself succeeded, so the run can continue.
            logger.warning("Could not write snapshot cache %s: %s", self.cache_file, e)
