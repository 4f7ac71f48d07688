from .table import EXPORT_COLUMNS, parse_csv, read_csv, to_csv, to_records, write_csv  # noqa

__all__ = ["EXPORT_COLUMNS", "parse_csv", "read_csv", "to_csv", "to_records", "write_csv"]
