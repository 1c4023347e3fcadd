# src/sitescan_report/core/handlers/domains_handler.py
import argparse
import logging

from cohort_stats.services.domain_inventory_service import DomainInventoryService
from sitescan_report.core.errors import LoadError
from sitescan_report.core.handlers.source_options import build_snapshot_loader
from sitescan_report.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)

domains_help_text = """
  domains [--source web|file] [--file <path>]
                      Counts the distinct final websites reached from NCI
                      target URLs, overall and per final domain.
""".strip()


def handle_domains(parsed_args: argparse.Namespace) -> int:
    loader = build_snapshot_loader(parsed_args)
    try:
        records = loader()
    except LoadError as e:
        logger.error("Snapshot load failed: %s", e)
        print(f"❌ Error: {e}")
        return 1

    service = DomainInventoryService(
        target_pattern=config_manager.get_nested("cohorts.nci_target_pattern"),
    )
    inventory = service.build(records)

    print(f"Matched target URLs: {inventory.matched_records}")
    print(f"Distinct final websites: {len(inventory.websites)}")
    for domain, websites in inventory.websites_by_domain.items():
        print(f"  {domain}: {len(websites)}")
    if parsed_args.verbose:
        for website in inventory.websites:
            print(f"   - {website}")
    return 0
