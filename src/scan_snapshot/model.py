# src/scan_snapshot/model.py (Snapshot Layer)
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

logger = logging.getLogger(__name__)


class FieldPresence(str, Enum):
    """
    Explicit presence state of a record field.
    A key that is missing, null, or holds an empty value is never 'PRESENT'.
    """
    ABSENT = "absent"
    NULL = "null"
    EMPTY = "empty"
    PRESENT = "present"


_TRUE_STRINGS = {"true", "yes", "1"}
_FALSE_STRINGS = {"false", "no", "0"}


# --- Lenient normalisers ---
# A cell of an unexpected type becomes null instead of failing the whole snapshot.

def _discard(v: Any, field: str) -> None:
    logger.debug("Ignoring unexpected %s value: %r", field, v)
    return None


def _to_text(v: Any, field: str) -> Optional[str]:
    if v is None or isinstance(v, str):
        return v
    return _discard(v, field)


def _to_float(v: Any, field: str) -> Optional[float]:
    if v is None:
        return None
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return float(v)
    if isinstance(v, str):
        try:
            return float(v)
        except ValueError:
            pass
    return _discard(v, field)


def _to_int(v: Any, field: str) -> Optional[int]:
    number = _to_float(v, field)
    if number is None:
        return None
    if not number.is_integer():
        return _discard(v, field)
    return int(number)


def _to_bool(v: Any, field: str) -> Optional[bool]:
    if v is None or isinstance(v, bool):
        return v
    if isinstance(v, int) and v in (0, 1):
        return bool(v)
    if isinstance(v, str):
        text = v.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return _discard(v, field)


class DapParameters(BaseModel):
    """Digital Analytics Program parameters reported for a page."""
    model_config = ConfigDict(frozen=True, extra="allow")

    agency: Optional[str] = None
    subagency: Optional[str] = None

    @field_validator("agency", "subagency", mode="before")
    @classmethod
    def _normalize_text(cls, v: Any, info: ValidationInfo) -> Optional[str]:
        return _to_text(v, info.field_name)


def _split_sequence(v: Any, field: str) -> Optional[List[str]]:
    """Normalizes a sequence-of-strings field. Bare strings are split on commas."""
    if v is None:
        return None
    if isinstance(v, str):
        return [part.strip() for part in v.split(",") if part.strip()]
    if isinstance(v, (list, tuple)):
        return [str(item) for item in v if item is not None]
    return _discard(v, field)


class SiteRecord(BaseModel):
    """
    One scanned URL from the weekly site-scanning snapshot.

    Only the fields used by the cohort report are declared; every other
    column of the snapshot is kept as an extra attribute. Instances are
    frozen: derived values always go into new structures.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    # Identity
    target_url: Optional[str] = None
    final_url_website: Optional[str] = None
    final_url_domain: Optional[str] = None
    target_url_redirects: Any = None

    # Performance
    cumulative_layout_shift: Optional[float] = None
    largest_contentful_paint: Optional[float] = None
    third_party_service_count: Optional[int] = None

    # Detection
    sitemap_xml_detected: Optional[bool] = None
    robots_txt_detected: Optional[bool] = None
    viewport_meta_tag: Optional[bool] = None
    site_search: Optional[bool] = None
    dap: Optional[bool] = None
    search_dot_gov: Optional[bool] = None
    ipv6: Optional[bool] = None

    # Text
    title: Optional[str] = None
    description: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    canonical_link: Optional[str] = None

    # Nested
    dap_parameters: Optional[DapParameters] = None
    third_party_service_domains: Optional[List[str]] = None

    # Required links
    required_links_url: Optional[List[str]] = None
    required_links_text: Optional[List[str]] = None

    @field_validator(
        "third_party_service_domains", "required_links_url", "required_links_text",
        mode="before",
    )
    @classmethod
    def _normalize_sequences(cls, v: Any, info: ValidationInfo) -> Optional[List[str]]:
        return _split_sequence(v, info.field_name)

    @field_validator(
        "target_url", "final_url_website", "final_url_domain",
        "title", "description", "og_title", "og_description", "canonical_link",
        mode="before",
    )
    @classmethod
    def _normalize_text(cls, v: Any, info: ValidationInfo) -> Optional[str]:
        return _to_text(v, info.field_name)

    @field_validator("cumulative_layout_shift", "largest_contentful_paint", mode="before")
    @classmethod
    def _normalize_float(cls, v: Any, info: ValidationInfo) -> Optional[float]:
        return _to_float(v, info.field_name)

    @field_validator("third_party_service_count", mode="before")
    @classmethod
    def _normalize_count(cls, v: Any, info: ValidationInfo) -> Optional[int]:
        return _to_int(v, info.field_name)

    @field_validator(
        "sitemap_xml_detected", "robots_txt_detected", "viewport_meta_tag",
        "site_search", "dap", "search_dot_gov", "ipv6",
        mode="before",
    )
    @classmethod
    def _normalize_flag(cls, v: Any, info: ValidationInfo) -> Optional[bool]:
        return _to_bool(v, info.field_name)

    @field_validator("dap_parameters", mode="before")
    @classmethod
    def _normalize_dap_parameters(cls, v: Any) -> Any:
        # Scans without DAP report an empty string or list instead of null
        if v is None or isinstance(v, dict) or isinstance(v, DapParameters):
            return v
        logger.debug("Ignoring non-mapping dap_parameters value: %r", v)
        return None

    def get(self, field: str, default: Any = None) -> Any:
        """Returns a declared or extra field by name; model attributes are not fields."""
        if field in type(self).model_fields:
            return getattr(self, field)
        return (self.model_extra or {}).get(field, default)

    def presence(self, field: str) -> FieldPresence:
        """Classifies a field as absent, null, empty, or present."""
        extra = self.model_extra or {}
        if field not in self.model_fields_set and field not in extra:
            return FieldPresence.ABSENT
        value = self.get(field)
        if value is None:
            return FieldPresence.NULL
        if isinstance(value, (str, list, tuple, dict)) and len(value) == 0:
            return FieldPresence.EMPTY
        if isinstance(value, str) and not value.strip():
            return FieldPresence.EMPTY
        return FieldPresence.PRESENT

    def has_value(self, field: str) -> bool:
        return self.presence(field) is FieldPresence.PRESENT

    def to_row(self) -> Dict[str, Any]:
        """Plain-dict working copy of the record."""
        return self.model_dump()
