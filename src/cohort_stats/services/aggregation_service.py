# src/cohort_stats/services/aggregation_service.py
import logging
import math
import warnings
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

import pandas as pd

from cohort_stats.model import (
    Cohort, CohortMeans, CohortSet, MetricSpec, RecordFilter, Transform,
)
from scan_snapshot.model import SiteRecord
from sitescan_report.core.errors import InsufficientDataWarning

logger = logging.getLogger(__name__)


# --- Transform & filter builders ---

def identity(record: SiteRecord) -> Mapping[str, Any]:
    return record.to_row()


def accept_all(record: SiteRecord) -> bool:
    return True


def not_null(field: str) -> RecordFilter:
    """Filter keeping records where `field` holds a non-null value."""
    def _filter(record: SiteRecord) -> bool:
        return record.get(field) is not None
    return _filter


def indicator(field: str, predicate: Callable[[SiteRecord], bool]) -> Transform:
    """
    Transform producing a 0/1 value under the derived name `field`.
    The mean of an indicator is the proportion of records satisfying it.
    """
    def _transform(record: SiteRecord) -> Mapping[str, Any]:
        return {field: 1 if predicate(record) else 0}
    return _transform


def has_required_link(record: SiteRecord, url_substrings: Iterable[str],
                      text_substrings: Iterable[str]) -> bool:
    """
    True if any required_links_url entry contains one of `url_substrings`,
    or any required_links_text entry contains one of `text_substrings`.
    """
    urls = record.required_links_url or []
    texts = record.required_links_text or []
    if any(sub in entry for entry in urls for sub in url_substrings):
        return True
    return any(sub in entry for entry in texts for sub in text_substrings)


# --- Means ---

def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def compute_mean(records: Sequence[SiteRecord], field: str,
                 transform: Optional[Transform] = None) -> float:
    """
    Mean of `field` over the working rows produced by `transform`.

    An empty input yields NaN and an InsufficientDataWarning; a value that
    cannot be read as a number makes the whole mean NaN.
    """
    if not records:
        warnings.warn(
            f"No records to compute '{field}' over; reporting NaN.",
            InsufficientDataWarning,
            stacklevel=2,
        )
        return math.nan

    transform = transform or identity
    values = pd.Series(
        [_to_number(transform(record).get(field)) for record in records],
        dtype="float64",
    )
    return float(values.sum(skipna=False) / len(values))


class AggregationService:
    """Evaluates metrics over the three home-page cohorts of one snapshot."""

    def __init__(self, home_cohorts: CohortSet):
        self.home_cohorts = home_cohorts

    @staticmethod
    def _mean_for(cohort: Cohort, field: str, transform: Optional[Transform],
                  record_filter: RecordFilter) -> float:
        selected = [r for r in cohort.records if record_filter(r)]
        if not selected:
            logger.debug("Cohort '%s' has no data for '%s'.", cohort.name, field)
        return compute_mean(selected, field, transform)

    def compute_mean_for_cohorts(self, field: str, transform: Optional[Transform] = None,
                                 record_filter: Optional[RecordFilter] = None) -> CohortMeans:
        record_filter = record_filter or accept_all
        return CohortMeans(
            www=self._mean_for(self.home_cohorts.www, field, transform, record_filter),
            nci=self._mean_for(self.home_cohorts.nci, field, transform, record_filter),
            other=self._mean_for(self.home_cohorts.other, field, transform, record_filter),
        )

    def evaluate(self, spec: MetricSpec) -> CohortMeans:
        return self.compute_mean_for_cohorts(spec.field, spec.transform, spec.filter)
