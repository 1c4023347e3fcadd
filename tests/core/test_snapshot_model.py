import pytest
from pydantic import ValidationError

from scan_snapshot.model import FieldPresence, SiteRecord
from scan_snapshot.services.snapshot_loader_service import SnapshotLoaderService


def test_presence_distinguishes_absent_null_empty_and_present():
    record = SiteRecord.model_validate({"title": "NCI", "description": None, "og_title": ""})

    assert record.presence("title") is FieldPresence.PRESENT
    assert record.presence("description") is FieldPresence.NULL
    assert record.presence("og_title") is FieldPresence.EMPTY
    assert record.presence("og_description") is FieldPresence.ABSENT


def test_whitespace_only_text_is_empty():
    record = SiteRecord.model_validate({"canonical_link": "   "})
    assert record.presence("canonical_link") is FieldPresence.EMPTY
    assert not record.has_value("canonical_link")


def test_extra_fields_are_kept_and_readable():
    record = SiteRecord.model_validate({"primary_scan_status": "completed", "login": ""})

    assert record.get("primary_scan_status") == "completed"
    assert record.presence("primary_scan_status") is FieldPresence.PRESENT
    assert record.presence("login") is FieldPresence.EMPTY
    assert record.get("does_not_exist", "fallback") == "fallback"


def test_records_are_immutable():
    record = SiteRecord.model_validate({"final_url_website": "www.cancer.gov"})
    with pytest.raises(ValidationError):
        record.final_url_website = "www.nih.gov"


def test_sequence_fields_accept_comma_separated_strings():
    record = SiteRecord.model_validate({
        "third_party_service_domains": "a.com, b.com,,",
        "required_links_url": ["https://x.gov/about", None],
        "required_links_text": None,
    })

    assert record.third_party_service_domains == ["a.com", "b.com"]
    assert record.required_links_url == ["https://x.gov/about"]
    assert record.required_links_text is None


def test_non_mapping_dap_parameters_become_null():
    assert SiteRecord.model_validate({"dap_parameters": ""}).dap_parameters is None

    record = SiteRecord.model_validate({"dap_parameters": {"agency": "HHS", "pua": "x"}})
    assert record.dap_parameters.agency == "HHS"
    assert record.dap_parameters.subagency is None


def test_numeric_strings_are_coerced():
    record = SiteRecord.model_validate({"cumulative_layout_shift": "0.12", "third_party_service_count": "4"})
    assert record.cumulative_layout_shift == pytest.approx(0.12)
    assert record.third_party_service_count == 4


@pytest.mark.parametrize("cell", [
    {"title": 404},
    {"third_party_service_count": 2.5},
    {"sitemap_xml_detected": "n/a"},
    {"cumulative_layout_shift": "slow"},
    {"required_links_url": 7},
])
def test_unexpected_cell_types_become_null(cell):
    field = next(iter(cell))
    record = SiteRecord.model_validate({"final_url_website": "www.cancer.gov", **cell})

    assert record.get(field) is None
    assert record.presence(field) is FieldPresence.NULL
    assert record.final_url_website == "www.cancer.gov"


def test_unexpected_dap_sub_field_becomes_null():
    record = SiteRecord.model_validate({"dap_parameters": {"agency": ["HHS"], "subagency": "NIH"}})
    assert record.dap_parameters.agency is None
    assert record.dap_parameters.subagency == "NIH"


def test_loose_flag_spellings_are_coerced():
    record = SiteRecord.model_validate({"ipv6": "TRUE", "dap": 0, "site_search": "no"})
    assert record.ipv6 is True
    assert record.dap is False
    assert record.site_search is False


def test_one_odd_record_does_not_fail_the_snapshot():
    payload = [
        {"final_url_website": "www.cancer.gov", "cumulative_layout_shift": 0.05},
        {"final_url_website": "dceg.cancer.gov", "title": 404, "third_party_service_count": 2.5},
    ]
    records = SnapshotLoaderService.parse_records(payload)

    assert len(records) == 2
    assert records[1].title is None
    assert records[1].third_party_service_count is None


def test_get_does_not_expose_model_attributes():
    record = SiteRecord.model_validate({"json": "payload"})

    assert record.get("json") == "payload"
    assert record.get("copy") is None
    assert record.get("schema", "fallback") == "fallback"
