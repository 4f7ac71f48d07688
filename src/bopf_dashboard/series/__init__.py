from .merge import SERIES_COLUMNS, actual_values, empty_series, merge_series

__all__ = ["SERIES_COLUMNS", "actual_values", "empty_series", "merge_series"]
