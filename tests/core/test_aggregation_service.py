import math

import pytest

from cohort_stats.model import Cohort, CohortSet
from cohort_stats.services.aggregation_service import (
    AggregationService, compute_mean, has_required_link, indicator, not_null,
)
from sitescan_report.core.errors import InsufficientDataWarning


def _cls_records(make_record, values):
    return [make_record(f"s{i}.cancer.gov", cumulative_layout_shift=v) for i, v in enumerate(values)]


def test_compute_mean_of_raw_field(make_record):
    records = _cls_records(make_record, [0.1, 0.2, 0.3])
    assert compute_mean(records, "cumulative_layout_shift") == pytest.approx(0.2)


def test_compute_mean_on_empty_input_warns_and_returns_nan():
    with pytest.warns(InsufficientDataWarning):
        result = compute_mean([], "cumulative_layout_shift")
    assert math.isnan(result)


def test_compute_mean_propagates_missing_values(make_record):
    records = _cls_records(make_record, [0.1, None])
    assert math.isnan(compute_mean(records, "cumulative_layout_shift"))


def test_compute_mean_coerces_booleans_and_numeric_strings(make_record):
    records = [make_record("a.gov", dap=True), make_record("b.gov", dap=False), make_record("c.gov", dap=True)]
    assert compute_mean(records, "dap") == pytest.approx(2 / 3)

    rows = {"x.gov": "4", "y.gov": " 2 "}
    transform = lambda r: {"n": rows[r.final_url_website]}
    assert compute_mean([make_record("x.gov"), make_record("y.gov")], "n", transform) == 3.0


def test_unparseable_value_makes_mean_nan(make_record):
    transform = lambda r: {"n": "n/a"}
    assert math.isnan(compute_mean([make_record("x.gov")], "n", transform))


def test_mean_of_indicator_is_proportion(make_record):
    values = [0.05, 0.3, 0.15, 0.4, 0.25]
    records = _cls_records(make_record, values)
    poor = lambda r: r.cumulative_layout_shift >= 0.25

    result = compute_mean(records, "cls_poor", indicator("cls_poor", poor))

    assert result == sum(1 for v in values if v >= 0.25) / len(values)


def test_has_required_link_is_null_safe(make_record):
    record = make_record("a.gov", required_links_url=None, required_links_text=None)
    assert has_required_link(record, ["x"], ["y"]) is False

    empty = make_record("b.gov", required_links_url=[], required_links_text=[])
    assert has_required_link(empty, ["x"], ["y"]) is False


def test_has_required_link_matches_url_or_text_substrings(make_record):
    by_url = make_record("a.gov", required_links_url=["https://a.gov/about-us"])
    by_text = make_record("b.gov", required_links_text=["freedom of information act"])

    assert has_required_link(by_url, ["about"], [])
    assert has_required_link(by_text, ["foia"], ["freedom of information"])
    assert not has_required_link(by_url, ["privacy"], ["about"])


def test_compute_mean_for_cohorts_applies_filter_per_cohort(make_record):
    home = CohortSet(
        www=Cohort(name="www", records=tuple(_cls_records(make_record, [0.05]))),
        nci=Cohort(name="nci", records=tuple(_cls_records(make_record, [0.3, None, 0.1]))),
        other=Cohort(name="other", records=tuple(_cls_records(make_record, [None]))),
    )
    service = AggregationService(home)

    with pytest.warns(InsufficientDataWarning):
        means = service.compute_mean_for_cohorts(
            "cumulative_layout_shift", record_filter=not_null("cumulative_layout_shift"),
        )

    assert means.www == pytest.approx(0.05)
    assert means.nci == pytest.approx(0.2)
    assert math.isnan(means.other)
