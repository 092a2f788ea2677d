from .validators import DEFAULT_WINDOW_DAYS, PointValidator, filter_valid, parse_number

__all__ = ["DEFAULT_WINDOW_DAYS", "PointValidator", "filter_valid", "parse_number"]
