# src/cohort_stats/metrics/registry.py
"""
Catalog of the metrics printed in the cohort comparison table.

Each line of the report is a MetricSpec; percentages are means of 0/1
indicators, so the catalog is pure data evaluated by AggregationService.
Order here is the order of the output rows.
"""
from typing import Dict, List, Optional, Sequence, Tuple

from cohort_stats.model import MetricSpec
from cohort_stats.services.aggregation_service import has_required_link, indicator, not_null
from scan_snapshot.model import SiteRecord

# --- Thresholds ---

# Core Web Vitals boundaries
CLS_GOOD = 0.1
CLS_POOR = 0.25
LCP_GOOD_MS = 2500
LCP_POOR_MS = 4000

# (label suffix, inclusive lower bound, inclusive upper bound or None)
THIRD_PARTY_BUCKETS: List[Tuple[str, int, Optional[int]]] = [
    ("0", 0, 0),
    ("1-5", 1, 5),
    ("6-10", 6, 10),
    ("11-20", 11, 20),
    ("more than 20", 21, None),
]

# --- Required links ---

# Upstream data carries several encodings of "español"; matched literally.
SPANISH_VARIANTS = [
    "spanish",
    "español",
    "espanol",
    "espaã±ol",
    "espa&ntilde;ol",
    "espa%c3%b1ol",
]

# category -> (url substrings, text substrings)
REQUIRED_LINKS: Dict[str, Tuple[Sequence[str], Sequence[str]]] = {
    "About": (["about"], ["about"]),
    "No FEAR Act": (["fear"], ["no fear act"]),
    "FOIA": (["foia"], ["foia", "freedom of information"]),
    "Privacy Policy": (["privacy"], ["privacy"]),
    "USA.gov": (["usa.gov"], ["usa.gov"]),
    "Spanish": (SPANISH_VARIANTS, SPANISH_VARIANTS),
    "Vulnerability Disclosure": (["vulnerability"], ["vulnerability disclosure"]),
    "Budget and Performance": (["performance", "budget"], ["budget and performance"]),
    "Inspector General": (["oig", "inspector"], ["inspector general"]),
}

DETECTION_FIELDS: List[Tuple[str, str]] = [
    ("sitemap_xml_detected", "% sitemap.xml detected"),
    ("robots_txt_detected", "% robots.txt detected"),
    ("viewport_meta_tag", "% having viewport meta tag"),
    ("site_search", "% having site search"),
    ("dap", "% participating in DAP"),
    ("search_dot_gov", "% using search.gov"),
    ("ipv6", "% supporting IPv6"),
]

TEXT_FIELDS: List[Tuple[str, str]] = [
    ("title", "% having title"),
    ("description", "% having meta description"),
    ("og_title", "% having og:title"),
    ("og_description", "% having og:description"),
    ("canonical_link", "% having canonical link"),
]


# --- Spec builders ---

def _between(field: str, low, high):
    """Predicate for low <= value < high; either bound may be None."""
    def _check(record: SiteRecord) -> bool:
        value = record.get(field)
        if low is not None and value < low:
            return False
        if high is not None and value >= high:
            return False
        return True
    return _check


def _count_in(field: str, low: int, high):
    def _check(record: SiteRecord) -> bool:
        value = record.get(field)
        return value >= low and (high is None or value <= high)
    return _check


def _vital_specs(field: str, short: str, unit: str, good, poor, good_text: str,
                 poor_text: str) -> List[MetricSpec]:
    has_value = not_null(field)
    return [
        MetricSpec(label=f"{short}: mean{unit}", field=field, filter=has_value),
        MetricSpec(
            label=f"{short}: % Good (< {good_text})", field=f"{field}__good",
            transform=indicator(f"{field}__good", _between(field, None, good)),
            filter=has_value,
        ),
        MetricSpec(
            label=f"{short}: % Needs improvement ({good_text} to {poor_text})",
            field=f"{field}__needs_improvement",
            transform=indicator(f"{field}__needs_improvement", _between(field, good, poor)),
            filter=has_value,
        ),
        MetricSpec(
            label=f"{short}: % Poor (>= {poor_text})", field=f"{field}__poor",
            transform=indicator(f"{field}__poor", _between(field, poor, None)),
            filter=has_value,
        ),
    ]


def _third_party_specs() -> List[MetricSpec]:
    field = "third_party_service_count"
    has_value = not_null(field)
    specs = [MetricSpec(label="Third-party services: mean count", field=field, filter=has_value)]
    for suffix, low, high in THIRD_PARTY_BUCKETS:
        derived = f"{field}__{low}"
        specs.append(MetricSpec(
            label=f"Third-party services: % with {suffix}",
            field=derived,
            transform=indicator(derived, _count_in(field, low, high)),
            filter=has_value,
        ))
    return specs


def _detection_specs() -> List[MetricSpec]:
    return [
        MetricSpec(
            label=label, field=field,
            transform=indicator(field, lambda r, f=field: r.get(f) is True),
            filter=not_null(field),
        )
        for field, label in DETECTION_FIELDS
    ]


def _text_specs() -> List[MetricSpec]:
    return [
        MetricSpec(
            label=label, field=f"{field}__present",
            transform=indicator(f"{field}__present", lambda r, f=field: r.has_value(f)),
        )
        for field, label in TEXT_FIELDS
    ]


def required_link_predicate(category: str):
    url_substrings, text_substrings = REQUIRED_LINKS[category]

    def _check(record: SiteRecord) -> bool:
        return has_required_link(record, url_substrings, text_substrings)
    return _check


def _required_link_specs() -> List[MetricSpec]:
    specs = []
    for category in REQUIRED_LINKS:
        derived = "required_link__" + category.lower().replace(" ", "_").replace(".", "_")
        specs.append(MetricSpec(
            label=f"% having {category} link",
            field=derived,
            transform=indicator(derived, required_link_predicate(category)),
        ))
    return specs


def build_catalog() -> List[MetricSpec]:
    return [
        *_vital_specs("cumulative_layout_shift", "Cumulative layout shift", "",
                      CLS_GOOD, CLS_POOR, "0.1", "0.25"),
        *_vital_specs("largest_contentful_paint", "Largest contentful paint", " (ms)",
                      LCP_GOOD_MS, LCP_POOR_MS, "2,500 ms", "4,000 ms"),
        *_third_party_specs(),
        *_detection_specs(),
        *_text_specs(),
        *_required_link_specs(),
    ]


METRICS: List[MetricSpec] = build_catalog()

# Fast lookup map
METRIC_BY_LABEL: Dict[str, MetricSpec] = {m.label: m for m in METRICS}
