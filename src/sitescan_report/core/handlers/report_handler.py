# src/sitescan_report/core/handlers/report_handler.py
import argparse
import logging

from cohort_stats.controllers.report_controller import ReportController
from cohort_stats.services.partition_service import PartitionService
from sitescan_report.core.errors import SiteScanError
from sitescan_report.core.handlers.source_options import build_snapshot_loader
from sitescan_report.core.managers.config_manager import config_manager
from sitescan_report.core.services.report_writer_service import ReportWriterService

logger = logging.getLogger(__name__)

report_help_text = """
  report [--source web|file] [--file <path>] [--save-cache] [-o <path>] [--excel <path>]
                      Compares www.cancer.gov, other NCI sites and other federal
                      sites over the weekly site-scanning snapshot.
""".strip()


def handle_report(parsed_args: argparse.Namespace) -> int:
    """
    Runs the cohort comparison and writes the three tables.

    Returns:
        0 for success, 1 when the snapshot can't be loaded or fails validation.
    """
    partitioner = PartitionService(
        www_website=config_manager.get_nested("cohorts.www_website", "www.cancer.gov"),
        nci_pattern=config_manager.get_nested("cohorts.nci_pattern"),
    )
    controller = ReportController(build_snapshot_loader(parsed_args), partitioner=partitioner)

    try:
        bundle = controller.generate()
    except SiteScanError as e:
        logger.error("Report aborted: %s", e)
        print(f"❌ Error: {e}")
        return 1

    logger.info("Cohort sizes: %s, home pages: %s", bundle.cohort_sizes, bundle.home_page_sizes)

    writer = ReportWriterService()
    try:
        writer.write_text(bundle, output=parsed_args.output)
        if parsed_args.excel:
            path = writer.write_excel(bundle, parsed_args.excel)
            print(f"✅ Excel report saved to {path}")
    except PermissionError as e:
        print(f"❌ Error: output file is locked or not writable: {e}")
        return 1
    except OSError as e:
        logger.error("Could not write report: %s", e, exc_info=True)
        print(f"❌ Error writing report: {e}")
        return 1

    return 0
