from cohort_stats.metrics.registry import (
    METRIC_BY_LABEL, METRICS, REQUIRED_LINKS, SPANISH_VARIANTS, required_link_predicate,
)


def test_labels_are_unique():
    assert len(METRIC_BY_LABEL) == len(METRICS)


def test_every_required_link_category_has_a_metric():
    for category in REQUIRED_LINKS:
        assert f"% having {category} link" in METRIC_BY_LABEL


def test_spanish_link_matches_literal_variants(make_record):
    check = required_link_predicate("Spanish")
    for variant in SPANISH_VARIANTS:
        record = make_record("a.gov", required_links_text=[f"en {variant}"])
        assert check(record), variant

    # No accent folding beyond the listed variants
    assert not check(make_record("b.gov", required_links_text=["espagnol"]))


def test_cls_buckets_partition_records(make_record):
    good = METRIC_BY_LABEL["Cumulative layout shift: % Good (< 0.1)"]
    needs = METRIC_BY_LABEL["Cumulative layout shift: % Needs improvement (0.1 to 0.25)"]
    poor = METRIC_BY_LABEL["Cumulative layout shift: % Poor (>= 0.25)"]

    for value in [0.0, 0.09, 0.1, 0.2, 0.25, 1.3]:
        record = make_record("a.gov", cumulative_layout_shift=value)
        flags = [spec.transform(record)[spec.field] for spec in (good, needs, poor)]
        assert sum(flags) == 1, value


def test_lcp_buckets_partition_records(make_record):
    good = METRIC_BY_LABEL["Largest contentful paint: % Good (< 2,500 ms)"]
    needs = METRIC_BY_LABEL["Largest contentful paint: % Needs improvement (2,500 ms to 4,000 ms)"]
    poor = METRIC_BY_LABEL["Largest contentful paint: % Poor (>= 4,000 ms)"]

    expected = {2499: good, 2500: needs, 3999: needs, 4000: poor, 4001: poor}
    for value, bucket in expected.items():
        record = make_record("a.gov", largest_contentful_paint=value)
        flags = {spec.label: spec.transform(record)[spec.field] for spec in (good, needs, poor)}
        assert sum(flags.values()) == 1, value
        assert flags[bucket.label] == 1, value


def test_third_party_buckets_cover_every_count(make_record):
    bucket_specs = [s for s in METRICS if s.label.startswith("Third-party services: % with")]
    for count in [0, 1, 5, 6, 10, 11, 20, 21, 80]:
        record = make_record("a.gov", third_party_service_count=count)
        assert sum(s.transform(record)[s.field] for s in bucket_specs) == 1, count


def test_filters_skip_records_without_data(make_record):
    spec = METRIC_BY_LABEL["Largest contentful paint: mean (ms)"]
    assert not spec.filter(make_record("a.gov"))
    assert spec.filter(make_record("a.gov", largest_contentful_paint=1800))


def test_detection_metric_counts_only_true(make_record):
    spec = METRIC_BY_LABEL["% supporting IPv6"]
    assert spec.transform(make_record("a.gov", ipv6=True))[spec.field] == 1
    assert spec.transform(make_record("a.gov", ipv6=False))[spec.field] == 0
    assert not spec.filter(make_record("a.gov"))


def test_text_metric_uses_presence(make_record):
    spec = METRIC_BY_LABEL["% having og:title"]
    assert spec.transform(make_record("a.gov", og_title="NCI"))[spec.field] == 1
    assert spec.transform(make_record("a.gov", og_title=""))[spec.field] == 0
    assert spec.transform(make_record("a.gov"))[spec.field] == 0
