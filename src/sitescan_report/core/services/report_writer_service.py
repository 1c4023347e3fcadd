# src/sitescan_report/core/services/report_writer_service.py
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, TextIO

import pandas as pd

from cohort_stats.model import ReportBundle
from sitescan_report.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ["metric", "www", "nci", "other"]
DAP_COLUMNS = ["agency", "subagency", "count"]
DOMAIN_COLUMNS = ["domain", "count"]


class ReportWriterService:
    """
    Turns a ReportBundle into the three output tables and writes them as
    comma separated text (stdout or file) or as an Excel workbook.

    Proportions are written as-is in [0, 1]; empty cohorts show as NaN.
    """

    NA_REP = "NaN"

    @staticmethod
    def to_frames(bundle: ReportBundle) -> Dict[str, pd.DataFrame]:
        report_df = pd.DataFrame(
            [[label, *means.as_row()] for label, means in bundle.report.items()],
            columns=REPORT_COLUMNS,
        )
        dap_df = pd.DataFrame(
            [[row.agency, row.subagency, row.count] for row in bundle.dap_groups],
            columns=DAP_COLUMNS,
        )
        domain_df = pd.DataFrame(
            [[row.domain, row.count] for row in bundle.domain_groups],
            columns=DOMAIN_COLUMNS,
        )
        return {"comparison": report_df, "dap_parameters": dap_df, "third_party_domains": domain_df}

    def render_text(self, bundle: ReportBundle) -> str:
        """The three sections in fixed order, separated by a blank line."""
        sections = [
            df.to_csv(index=False, na_rep=self.NA_REP, lineterminator="\n")
            for df in self.to_frames(bundle).values()
        ]
        return "\n".join(sections)

    def write_text(self, bundle: ReportBundle, output: Optional[Path] = None,
                   stream: Optional[TextIO] = None) -> None:
        text = self.render_text(bundle)
        if output is None:
            (stream or sys.stdout).write(text)
            return

        PathUtils.ensure_parent_dir(output).write_text(text, encoding="utf-8")
        logger.info("Report written to %s", output)

    def write_excel(self, bundle: ReportBundle, output: Path) -> Path:
        """Writes one sheet per table and widens the columns to fit."""
        output = PathUtils.ensure_parent_dir(output.with_suffix(".xlsx"))

        sheet_names = {
            "comparison": "Cohort Comparison",
            "dap_parameters": "DAP Parameters",
            "third_party_domains": "Third-party Domains",
        }
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            for key, df in self.to_frames(bundle).items():
                df.to_excel(writer, sheet_name=sheet_names[key], index=False)

            for sheet in writer.sheets.values():
                for col in sheet.columns:
                    max_len = max((len(str(cell.value)) for cell in col if cell.value is not None), default=0)
                    sheet.column_dimensions[col[0].column_letter].width = min(max_len + 2, 100)

        logger.info("Excel report written to %s", output)
        return output
