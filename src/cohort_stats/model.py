# src/cohort_stats/model.py
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from scan_snapshot.model import SiteRecord

# A transform maps a record to the working row a metric reads its field from.
Transform = Callable[[SiteRecord], Mapping[str, Any]]
RecordFilter = Callable[[SiteRecord], bool]


class Cohort(BaseModel):
    """A named, ordered, immutable sequence of records."""
    model_config = ConfigDict(frozen=True)

    name: str
    records: Tuple[SiteRecord, ...] = ()

    @property
    def size(self) -> int:
        return len(self.records)

    def derive(self, records) -> "Cohort":
        """Returns a new cohort with the same name holding `records`."""
        return Cohort(name=self.name, records=tuple(records))


class CohortSet(BaseModel):
    """The three top-level cohorts: www, other NCI sites, other federal sites."""
    model_config = ConfigDict(frozen=True)

    www: Cohort
    nci: Cohort
    other: Cohort

    def as_tuple(self) -> Tuple[Cohort, Cohort, Cohort]:
        return self.www, self.nci, self.other

    @property
    def total(self) -> int:
        return self.www.size + self.nci.size + self.other.size


class MetricSpec(BaseModel):
    """
    Declarative definition of one report line.

    `transform` builds the working row (identity when None), `field` is read
    from that row, and `filter` drops records lacking the underlying data.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    label: str
    field: str
    transform: Optional[Transform] = None
    filter: Optional[RecordFilter] = None
    description: str = ""


class CohortMeans(BaseModel):
    """One metric evaluated over the www / nci / other home-page cohorts."""
    model_config = ConfigDict(frozen=True)

    www: float
    nci: float
    other: float

    def as_row(self) -> List[float]:
        return [self.www, self.nci, self.other]


# label -> per-cohort values, in catalog order
ComparisonReport = Dict[str, CohortMeans]


class DapGroupRow(BaseModel):
    agency: str
    subagency: str
    count: int


class DomainGroupRow(BaseModel):
    domain: str
    count: int


class ReportBundle(BaseModel):
    """Everything one report run hands to the output writer."""
    model_config = ConfigDict(frozen=True)

    report: ComparisonReport = Field(default_factory=dict)
    dap_groups: List[DapGroupRow] = Field(default_factory=list)
    domain_groups: List[DomainGroupRow] = Field(default_factory=list)
    cohort_sizes: Dict[str, int] = Field(default_factory=dict)
    home_page_sizes: Dict[str, int] = Field(default_factory=dict)
