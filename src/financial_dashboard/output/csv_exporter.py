"""CSV exporter for spreadsheet imports of a dashboard view."""

import csv
from decimal import Decimal
from pathlib import Path

from financial_dashboard.config import Config
from financial_dashboard.models.report import NOT_AVAILABLE, DashboardView
from financial_dashboard.utils.date_utils import date_to_iso
from financial_dashboard.utils.decimal_utils import format_percentage
from financial_dashboard.utils.logging_config import get_logger
from financial_dashboard.utils.sanitize import sanitize_cell

logger = get_logger(__name__)


def _amount(value: Decimal | None) -> str:
    """Machine-readable amount with two decimals ("" for None)."""
    if value is None:
        return ""
    return f"{value:.2f}"


class CSVExporter:
    """Exports a dashboard view to CSV files.

    Creates in the output directory:
    - pivot.csv (category x month table with totals)
    - postings.csv (postings that passed the filters)
    - metrics.csv (summary indicators)
    """

    def __init__(self, config: Config):
        """Initialize CSV exporter.

        Args:
            config: Application configuration.
        """
        self.config = config
        self.month_labels = config.display.month_labels

    def export(self, output_dir: Path, view: DashboardView) -> list[Path]:
        """Export the view to CSV files.

        Args:
            output_dir: Directory for the files (created if missing).
            view: Dashboard view to export.

        Returns:
            List of paths to created CSV files.
        """
        output_dir.mkdir(parents=True, exist_ok=True)

        created_files = [
            self._export_pivot(output_dir, view),
            self._export_postings(output_dir, view),
            self._export_metrics(output_dir, view),
        ]

        logger.info(f"Exported {len(created_files)} CSV files to {output_dir}")
        return created_files

    def _export_pivot(self, output_dir: Path, view: DashboardView) -> Path:
        """Export the pivot table with a totals footer."""
        output_path = output_dir / "pivot.csv"
        pivot = view.pivot

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Category", *self.month_labels, f"Total {pivot.year}"])

            for row in pivot.rows:
                writer.writerow([
                    sanitize_cell(row.name),
                    *(_amount(value) for value in row.monthly_totals),
                    _amount(row.total),
                ])

            writer.writerow([
                "Total",
                *(_amount(value) for value in pivot.monthly_totals),
                _amount(pivot.grand_total),
            ])

        logger.info(f"Exported {len(pivot.rows)} pivot rows to {output_path}")
        return output_path

    def _export_postings(self, output_dir: Path, view: DashboardView) -> Path:
        """Export the filtered postings, oldest first."""
        output_path = output_dir / "postings.csv"
        postings = sorted(view.filtered_postings, key=lambda p: (p.date, p.id))

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Date", "Id", "Category", "Description", "Origin", "Unit", "Amount"])

            for posting in postings:
                writer.writerow([
                    date_to_iso(posting.date),
                    sanitize_cell(posting.id),
                    sanitize_cell(posting.category),
                    sanitize_cell(posting.description),
                    sanitize_cell(posting.origin),
                    sanitize_cell(posting.unit),
                    _amount(posting.amount),
                ])

        logger.info(f"Exported {len(postings)} postings to {output_path}")
        return output_path

    def _export_metrics(self, output_dir: Path, view: DashboardView) -> Path:
        """Export the summary indicators as metric/value pairs."""
        output_path = output_dir / "metrics.csv"
        metrics = view.metrics
        trend = metrics.trend

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Metric", "Value"])
            writer.writerow(["Year", view.filters.year])
            writer.writerow(["Accumulated Result", _amount(metrics.accumulated_result)])
            writer.writerow([
                "Trend %",
                format_percentage(trend.percentage) if trend.percentage is not None else "",
            ])
            writer.writerow(["Average Monthly Expense", _amount(metrics.average_monthly_expense)])
            writer.writerow(["Top Expense Category", sanitize_cell(metrics.top_expense_category)])
            writer.writerow(["Period", metrics.period_label or NOT_AVAILABLE])

        logger.info(f"Exported metrics to {output_path}")
        return output_path
