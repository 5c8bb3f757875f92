"""Excel workbook writer for a dashboard view."""

from pathlib import Path

from financial_dashboard.config import Config
from financial_dashboard.models.report import DashboardView
from financial_dashboard.utils.decimal_utils import format_percentage
from financial_dashboard.utils.logging_config import get_logger
from financial_dashboard.utils.sanitize import sanitize_cell

logger = get_logger(__name__)

# Import openpyxl
try:
    from openpyxl import Workbook
    from openpyxl.styles import Alignment, Font, PatternFill
    from openpyxl.utils import get_column_letter
    from openpyxl.worksheet.worksheet import Worksheet

    OPENPYXL_AVAILABLE = True
except ImportError:
    OPENPYXL_AVAILABLE = False
    Workbook = None  # type: ignore


class ExcelWriter:
    """Writes a dashboard view to an Excel workbook.

    Generates sheets:
    - Pivot (month values, SUM formulas for row totals and the footer)
    - Postings (filtered postings)
    - Summary (KPIs)
    """

    SHEET_PIVOT = "Pivot"
    SHEET_POSTINGS = "Postings"
    SHEET_SUMMARY = "Summary"

    def __init__(self, config: Config):
        """Initialize Excel writer.

        Args:
            config: Application configuration.
        """
        if not OPENPYXL_AVAILABLE:
            raise ImportError("openpyxl library not installed")

        self.config = config
        self.output_config = config.output

        # Style definitions
        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(
            start_color="4472C4", end_color="4472C4", fill_type="solid"
        )
        self.bold = Font(bold=True)
        self.right_aligned = Alignment(horizontal="right")

    def write(self, output_path: Path, view: DashboardView) -> None:
        """Write the view to an Excel workbook.

        Args:
            output_path: Path for output file.
            view: Dashboard view to write.
        """
        logger.info(f"Writing Excel workbook to {output_path}")

        wb = Workbook()
        # Remove default sheet
        if wb.active:
            wb.remove(wb.active)

        self._create_pivot_sheet(wb, view)
        self._create_postings_sheet(wb, view)
        self._create_summary_sheet(wb, view)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        logger.info(f"Excel workbook saved: {output_path}")

    def _write_header(self, ws: "Worksheet", headers: list[str]) -> None:
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill

    def _create_pivot_sheet(self, wb: "Workbook", view: DashboardView) -> None:
        """Create the pivot sheet.

        Month cells hold values; the row total column and the footer row are
        SUM formulas over them, so edits in the workbook stay consistent.

        Args:
            wb: Workbook to add sheet to.
            view: Dashboard view.
        """
        ws = wb.create_sheet(self.SHEET_PIVOT)
        pivot = view.pivot
        month_labels = self.config.display.month_labels
        money_fmt = self._money_format()

        self._write_header(ws, ["Category", *month_labels, f"Total {pivot.year}"])

        first_month_col = get_column_letter(2)
        last_month_col = get_column_letter(len(month_labels) + 1)
        total_col = len(month_labels) + 2

        for row, aggregate in enumerate(pivot.rows, 2):
            ws.cell(row=row, column=1, value=sanitize_cell(aggregate.name))
            for col, value in enumerate(aggregate.monthly_totals, 2):
                cell = ws.cell(row=row, column=col, value=float(value))
                cell.number_format = money_fmt

            cell = ws.cell(
                row=row,
                column=total_col,
                value=f"=SUM({first_month_col}{row}:{last_month_col}{row})",
            )
            cell.number_format = money_fmt
            cell.font = self.bold

        footer_row = len(pivot.rows) + 2
        ws.cell(row=footer_row, column=1, value="Total").font = self.bold
        if pivot.rows:
            for col in range(2, total_col + 1):
                letter = get_column_letter(col)
                cell = ws.cell(
                    row=footer_row,
                    column=col,
                    value=f"=SUM({letter}2:{letter}{footer_row - 1})",
                )
                cell.number_format = money_fmt
                cell.font = self.bold
        else:
            for col in range(2, total_col + 1):
                cell = ws.cell(row=footer_row, column=col, value=0)
                cell.number_format = money_fmt
                cell.font = self.bold

        ws.column_dimensions["A"].width = 25
        for col in range(2, total_col + 1):
            ws.column_dimensions[get_column_letter(col)].width = 12

        ws.freeze_panes = "B2"

    def _create_postings_sheet(self, wb: "Workbook", view: DashboardView) -> None:
        """Create the sheet listing the filtered postings, oldest first."""
        ws = wb.create_sheet(self.SHEET_POSTINGS)
        headers = ["Date", "Id", "Category", "Description", "Origin", "Unit", "Amount"]
        self._write_header(ws, headers)

        postings = sorted(view.filtered_postings, key=lambda p: (p.date, p.id))
        for row, posting in enumerate(postings, 2):
            ws.cell(row=row, column=1, value=posting.date)
            ws.cell(row=row, column=2, value=sanitize_cell(posting.id))
            ws.cell(row=row, column=3, value=sanitize_cell(posting.category))
            ws.cell(row=row, column=4, value=sanitize_cell(posting.description))
            ws.cell(row=row, column=5, value=sanitize_cell(posting.origin))
            ws.cell(row=row, column=6, value=sanitize_cell(posting.unit))
            amount_cell = ws.cell(row=row, column=7, value=float(posting.amount))
            amount_cell.number_format = self._money_format()

        widths = [12, 14, 25, 40, 20, 15, 14]
        for i, width in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(i)].width = width

        ws.freeze_panes = "A2"

    def _create_summary_sheet(self, wb: "Workbook", view: DashboardView) -> None:
        """Create the KPI summary sheet."""
        ws = wb.create_sheet(self.SHEET_SUMMARY)
        metrics = view.metrics
        money_fmt = self._money_format()

        ws.cell(row=1, column=1, value=f"Dashboard {view.filters.year}").font = Font(
            bold=True, size=14
        )

        rows: list[tuple[str, object, bool]] = [
            ("Accumulated Result", metrics.accumulated_result, True),
            (
                "Trend %",
                format_percentage(metrics.trend.percentage)
                if metrics.trend.percentage is not None
                else self.config.display.no_comparison_label,
                False,
            ),
            ("Average Monthly Expense", metrics.average_monthly_expense, True),
            ("Top Expense Category", sanitize_cell(metrics.top_expense_category), False),
            ("Period", metrics.period_label, False),
            ("Units", sanitize_cell(", ".join(sorted(view.filters.units))), False),
        ]

        for row, (label, value, is_money) in enumerate(rows, 3):
            ws.cell(row=row, column=1, value=label).font = self.bold
            if is_money:
                cell = ws.cell(
                    row=row, column=2, value=float(value) if value is not None else None  # type: ignore[arg-type]
                )
                cell.number_format = money_fmt
            else:
                cell = ws.cell(row=row, column=2, value=value)
                cell.alignment = self.right_aligned

        ws.column_dimensions["A"].width = 28
        ws.column_dimensions["B"].width = 30

    def _money_format(self) -> str:
        """Get number format for money values.

        Returns:
            Excel number format string (whole units, negatives in parentheses).
        """
        symbol = self.output_config.currency_symbol
        return f'{symbol}#,##0_);[Red]({symbol}#,##0)'
