# src/cohort_stats/services/domain_inventory_service.py
import logging
import re
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from scan_snapshot.model import SiteRecord

logger = logging.getLogger(__name__)

NCI_TARGET_PATTERN = r"^.*\.(cancer|nci\.nih|smokefree)\.gov$"
INVENTORY_DOMAINS = ["cancer.gov", "smokefree.gov", "nih.gov"]


class DomainInventory(BaseModel):
    """Distinct final websites reached from NCI target URLs."""
    matched_records: int = 0
    websites: List[str] = Field(default_factory=list)
    websites_by_domain: Dict[str, List[str]] = Field(default_factory=dict)


class DomainInventoryService:
    """
    Lists which websites the NCI target URLs in a snapshot end up on,
    overall and per final registrable domain.
    """

    def __init__(self, target_pattern: Optional[str] = None,
                 domains: Optional[List[str]] = None):
        self.target_pattern = re.compile(target_pattern or NCI_TARGET_PATTERN)
        self.domains = list(domains or INVENTORY_DOMAINS)

    def matches(self, record: SiteRecord) -> bool:
        return bool(record.target_url) and self.target_pattern.match(record.target_url) is not None

    def build(self, records: Iterable[SiteRecord]) -> DomainInventory:
        matched = [r for r in records if self.matches(r)]
        logger.debug("%d records match %s", len(matched), self.target_pattern.pattern)

        # dict.fromkeys keeps first-seen order while de-duplicating
        websites = list(dict.fromkeys(r.final_url_website for r in matched if r.final_url_website))
        by_domain = {
            domain: list(dict.fromkeys(
                r.final_url_website for r in matched
                if r.final_url_domain == domain and r.final_url_website
            ))
            for domain in self.domains
        }
        return DomainInventory(
            matched_records=len(matched),
            websites=websites,
            websites_by_domain=by_domain,
        )
