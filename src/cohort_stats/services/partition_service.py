# src/cohort_stats/services/partition_service.py
import logging
import re
from typing import Callable, Iterable, List, Optional, Tuple, Union

from cohort_stats.model import Cohort, CohortSet
from scan_snapshot.model import SiteRecord
from sitescan_report.core.errors import IntegrityError

logger = logging.getLogger(__name__)

WWW_WEBSITE = "www.cancer.gov"
NCI_WEBSITE_PATTERN = r"^.*\.(cancer|ncifcrf|nci\.nih|smokefree)\.gov$"


def partition(
    records: Iterable[SiteRecord], predicate: Callable[[SiteRecord], bool]
) -> Tuple[List[SiteRecord], List[SiteRecord]]:
    """Splits records into (matches, others), keeping input order in both."""
    matches: List[SiteRecord] = []
    others: List[SiteRecord] = []
    for record in records:
        (matches if predicate(record) else others).append(record)
    return matches, others


class PartitionService:
    """
    Stratifies a snapshot into the www / other-NCI / other-federal cohorts
    and derives the home-page subset of each.
    """

    def __init__(self, www_website: str = WWW_WEBSITE,
                 nci_pattern: Union[str, re.Pattern, None] = None):
        self.www_website = www_website
        self.nci_pattern = re.compile(nci_pattern or NCI_WEBSITE_PATTERN)

    def is_www(self, record: SiteRecord) -> bool:
        return record.final_url_website == self.www_website

    def is_nci(self, record: SiteRecord) -> bool:
        website: Optional[str] = record.final_url_website
        return bool(website) and self.nci_pattern.match(website) is not None

    def split_cohorts(self, records: Iterable[SiteRecord]) -> CohortSet:
        """Two passes of `partition`: www first, then NCI from the remainder."""
        www, rest = partition(records, self.is_www)
        nci, other = partition(rest, self.is_nci)
        cohorts = CohortSet(
            www=Cohort(name="www", records=tuple(www)),
            nci=Cohort(name="nci", records=tuple(nci)),
            other=Cohort(name="other", records=tuple(other)),
        )
        logger.info(
            "Partitioned %d records: www=%d, nci=%d, other=%d",
            cohorts.total, cohorts.www.size, cohorts.nci.size, cohorts.other.size,
        )
        return cohorts

    @staticmethod
    def is_home_page(record: SiteRecord) -> bool:
        """
        A record without a redirect target is the canonical home-page entry,
        even when the final URL differs through a same-domain redirect.
        """
        return record.target_url_redirects is None

    def extract_home_pages(self, cohort: Cohort) -> Cohort:
        homes, _ = partition(cohort.records, self.is_home_page)
        return cohort.derive(homes)

    def home_page_cohorts(self, cohorts: CohortSet) -> CohortSet:
        home = CohortSet(
            www=self.extract_home_pages(cohorts.www),
            nci=self.extract_home_pages(cohorts.nci),
            other=self.extract_home_pages(cohorts.other),
        )
        logger.info(
            "Home pages: www=%d, nci=%d, other=%d",
            home.www.size, home.nci.size, home.other.size,
        )
        return home

    @staticmethod
    def validate_www_home(home_cohorts: CohortSet) -> SiteRecord:
        """Returns the single www home page or raises IntegrityError."""
        count = home_cohorts.www.size
        if count != 1:
            urls = [r.target_url for r in home_cohorts.www.records]
            raise IntegrityError(
                f"Expected exactly one www home page, found {count}: {urls}"
            )
        return home_cohorts.www.records[0]
