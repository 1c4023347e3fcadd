# tests/conftest.py
from typing import Any, Dict

import pytest

from scan_snapshot.model import SiteRecord
from sitescan_report.core.managers.config_manager import config_manager


def _make_record(website: str = "www.usa.gov", **fields: Any) -> SiteRecord:
    data: Dict[str, Any] = {
        "target_url": fields.pop("target_url", website),
        "final_url_website": website,
    }
    data.update(fields)
    return SiteRecord.model_validate(data)


@pytest.fixture(autouse=True)
def restore_settings():
    """CLI runs write their flag overrides into the settings singleton."""
    yield
    config_manager.reset()


@pytest.fixture
def make_record():
    """Factory building a SiteRecord the way the snapshot loader would."""
    return _make_record


@pytest.fixture
def scenario_records():
    """One www home page, two NCI sites, two redirecting federal records."""
    return [
        _make_record("www.cancer.gov", target_url_redirects=None, cumulative_layout_shift=0.05),
        _make_record("dceg.cancer.gov", target_url_redirects=None, cumulative_layout_shift=0.3,
                     dap_parameters={"agency": "HHS", "subagency": "NIH"},
                     third_party_service_domains=["fonts.googleapis.com", "www.youtube.com"]),
        _make_record("teen.smokefree.gov", target_url_redirects=None, cumulative_layout_shift=0.15,
                     dap_parameters={"agency": "HHS"},
                     third_party_service_domains=["fonts.googleapis.com"]),
        _make_record("www.usa.gov", target_url_redirects=True, cumulative_layout_shift=0.9),
        _make_record("www.nasa.gov", target_url_redirects=True, largest_contentful_paint=1200),
    ]
