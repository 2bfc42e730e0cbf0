from .reader import DatasetReadError, MissingColumnsError, read_dataset, require_columns

__all__ = ["DatasetReadError", "MissingColumnsError", "read_dataset", "require_columns"]
