# src/cohort_stats/controllers/report_controller.py
import logging
from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd

from cohort_stats.metrics.registry import METRICS
from cohort_stats.model import (
    Cohort, CohortSet, ComparisonReport, DapGroupRow, DomainGroupRow, MetricSpec, ReportBundle,
)
from cohort_stats.services.aggregation_service import AggregationService
from cohort_stats.services.partition_service import PartitionService
from scan_snapshot.model import SiteRecord

logger = logging.getLogger(__name__)

NONE_LABEL = "_NONE_"


def build_report(home_cohorts: CohortSet, specs: Optional[Sequence[MetricSpec]] = None) -> ComparisonReport:
    """Evaluates every metric over the home-page cohorts, in catalog order."""
    aggregator = AggregationService(home_cohorts)
    report: ComparisonReport = {}
    for spec in (METRICS if specs is None else specs):
        report[spec.label] = aggregator.evaluate(spec)
    return report


def group_dap_parameters(cohort: Cohort) -> List[DapGroupRow]:
    """
    Counts records per (agency, subagency) pair, in first-seen order.
    A missing sub-field is labelled '_NONE_'.
    """
    rows = []
    for record in cohort.records:
        params = record.dap_parameters
        agency = params.agency if params is not None and params.agency else NONE_LABEL
        subagency = params.subagency if params is not None and params.subagency else NONE_LABEL
        rows.append({"agency": agency, "subagency": subagency})

    if not rows:
        return []

    df = pd.DataFrame(rows)
    counts = df.groupby(["agency", "subagency"], sort=False).size().reset_index(name="records")
    return [
        DapGroupRow(agency=row.agency, subagency=row.subagency, count=int(row.records))
        for row in counts.itertuples(index=False)
    ]


def group_third_party_domains(cohort: Cohort) -> List[DomainGroupRow]:
    """Counts each third-party service domain across the cohort, in first-seen order."""
    domains = pd.Series(
        [record.third_party_service_domains or [] for record in cohort.records],
        dtype="object",
    ).explode().dropna().reset_index(drop=True)

    if domains.empty:
        return []

    counts = domains.groupby(domains.values, sort=False).size()
    return [DomainGroupRow(domain=str(domain), count=int(count)) for domain, count in counts.items()]


class ReportController:
    """
    Runs one report: load -> partition -> home pages -> validate -> aggregate.

    The loader is any callable returning the snapshot records, so the web
    download, the cached file, and test fixtures are interchangeable.
    """

    def __init__(self, loader: Callable[[], Sequence[SiteRecord]],
                 partitioner: Optional[PartitionService] = None,
                 specs: Optional[Sequence[MetricSpec]] = None):
        self.loader = loader
        self.partitioner = partitioner or PartitionService()
        self.specs = list(METRICS if specs is None else specs)

    def generate(self) -> ReportBundle:
        records = self.loader()
        cohorts = self.partitioner.split_cohorts(records)
        home_cohorts = self.partitioner.home_page_cohorts(cohorts)

        www_home = self.partitioner.validate_www_home(home_cohorts)
        logger.info("www home page: %s", www_home.target_url)

        report = build_report(home_cohorts, self.specs)
        logger.info("Computed %d metrics.", len(report))

        return ReportBundle(
            report=report,
            dap_groups=group_dap_parameters(home_cohorts.nci),
            domain_groups=group_third_party_domains(home_cohorts.nci),
            cohort_sizes=self._sizes(cohorts),
            home_page_sizes=self._sizes(home_cohorts),
        )

    @staticmethod
    def _sizes(cohorts: CohortSet) -> Dict[str, int]:
        return {cohort.name: cohort.size for cohort in cohorts.as_tuple()}
