"""Financial dashboard: category x month pivot and KPIs over company postings."""

__version__ = "0.1.0"
