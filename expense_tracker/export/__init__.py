"""Export package."""

from expense_tracker.export.csv_export import CSV_HEADERS, export_csv, write_csv

__all__ = ["CSV_HEADERS", "export_csv", "write_csv"]
