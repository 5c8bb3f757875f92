"""Output modules for the terminal, CSV, and Excel."""

from financial_dashboard.output.csv_exporter import CSVExporter
from financial_dashboard.output.excel_writer import ExcelWriter
from financial_dashboard.output.terminal import TerminalRenderer

__all__ = ["CSVExporter", "ExcelWriter", "TerminalRenderer"]
