"""Terminal rendering of a dashboard view with rich."""

from decimal import Decimal

from rich.console import Console
from rich.markup import escape
from rich.columns import Columns
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from financial_dashboard.config import Config
from financial_dashboard.models.posting import Posting
from financial_dashboard.models.report import (
    NOT_AVAILABLE,
    DashboardMetrics,
    DashboardView,
    TrendResult,
)
from financial_dashboard.utils.decimal_utils import format_amount, format_percentage

KPI_ACCUMULATED_RESULT = "Resultado acumulado"
KPI_AVERAGE_EXPENSE = "Despesa média mensal"
KPI_TOP_CATEGORY = "Top categoria"
KPI_TOP_CATEGORY_NOTE = "Maior impacto no período"
NO_POSTINGS_MESSAGE = "Sem lançamentos para esta categoria."
NO_ROWS_MESSAGE = "Nenhuma categoria para os filtros selecionados."


def amount_style(amount: Decimal) -> str:
    """Rich style for a signed amount: red, green, or dim for zero."""
    if amount < 0:
        return "red"
    if amount > 0:
        return "green"
    return "dim"


def trend_text(trend: TrendResult, config: Config) -> str:
    """Subtitle of the accumulated result card.

    Args:
        trend: Month-over-month trend.
        config: Configuration holding the display templates.

    Returns:
        The templated variation, or the no-comparison label.
    """
    if trend.percentage is None:
        return config.display.no_comparison_label
    return config.display.trend_template.format(percentage=format_percentage(trend.percentage))


class TerminalRenderer:
    """Prints the pivot table, KPI cards and drill-down postings."""

    def __init__(self, config: Config, console: Console | None = None):
        """Initialize the renderer.

        Args:
            config: Application configuration.
            console: Console to print to (a new one when None).
        """
        self.config = config
        self.console = console or Console()
        self.separator = config.display.thousands_separator

    def _money(self, amount: Decimal) -> Text:
        return Text(format_amount(amount, self.separator), style=amount_style(amount))

    def render(self, view: DashboardView) -> None:
        """Print KPI cards followed by the pivot table."""
        self.render_kpis(view.metrics)
        self.render_pivot(view)

    def render_kpis(self, metrics: DashboardMetrics) -> None:
        """Print the KPI cards side by side."""
        self.console.print(Columns(self.kpi_panels(metrics), equal=True, expand=True))

    def kpi_panels(self, metrics: DashboardMetrics) -> list[Panel]:
        """Build the KPI cards.

        Without data every card shows its "N/A" sentinel and the trend card
        shows the no-comparison label.
        """
        if metrics.accumulated_result is None:
            result_value = Text(NOT_AVAILABLE)
        else:
            result_value = self._money(metrics.accumulated_result)
            result_value.stylize("bold red" if metrics.is_loss else "bold green")

        if metrics.average_monthly_expense is None:
            expense_value = Text(NOT_AVAILABLE)
        else:
            expense_value = Text(
                format_amount(metrics.average_monthly_expense, self.separator), style="bold red"
            )

        cards = [
            (KPI_ACCUMULATED_RESULT, result_value, trend_text(metrics.trend, self.config)),
            (KPI_AVERAGE_EXPENSE, expense_value, metrics.period_label),
            (
                KPI_TOP_CATEGORY,
                Text(metrics.top_expense_category, style="bold"),
                KPI_TOP_CATEGORY_NOTE,
            ),
        ]

        panels = []
        for label, value, note in cards:
            body = Text.assemble(value, "\n", Text(note, style="dim"))
            panels.append(Panel(body, title=label, title_align="left"))
        return panels

    def pivot_table(self, view: DashboardView) -> Table:
        """Build the category x month table with a totals footer."""
        pivot = view.pivot
        table = Table(
            show_footer=True,
            header_style="bold",
            footer_style="bold",
            caption=NO_ROWS_MESSAGE if pivot.is_empty else None,
        )

        table.add_column("Categoria", footer="Total", no_wrap=True)
        for index, label in enumerate(self.config.display.month_labels):
            table.add_column(
                label,
                footer=self._money(pivot.monthly_totals[index]),
                justify="right",
            )
        table.add_column(
            f"Total {pivot.year}",
            footer=self._money(pivot.grand_total),
            justify="right",
        )

        for row in pivot.rows:
            table.add_row(
                Text(row.name),
                *(self._money(value) for value in row.monthly_totals),
                self._money(row.total),
            )
        return table

    def render_pivot(self, view: DashboardView) -> None:
        """Print the pivot table; an empty selection keeps its zero footer."""
        self.console.print(self.pivot_table(view))

    def details_table(self, category: str, postings: list[Posting]) -> Table:
        """Build the drill-down table of one category."""
        table = Table(title=escape(category), caption=f"{len(postings)} itens")
        table.add_column("Data")
        table.add_column("Descrição")
        table.add_column("Origem", style="dim")
        table.add_column("Unidade", style="dim")
        table.add_column("Valor", justify="right")

        for posting in postings:
            table.add_row(
                posting.date.strftime("%d/%m/%Y"),
                Text(posting.description),
                Text(posting.origin),
                Text(posting.unit),
                self._money(posting.amount),
            )
        return table

    def render_details(self, view: DashboardView, category: str) -> None:
        """Print the postings of one category, newest first."""
        postings = view.details(category)
        if not postings:
            self.console.print(f"[yellow]{escape(category)}: {NO_POSTINGS_MESSAGE}[/yellow]")
            return
        self.console.print(self.details_table(category, postings))
