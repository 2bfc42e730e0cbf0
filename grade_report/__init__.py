"""Grade report generator: summary statistics, PDF / CSV export."""

__version__ = "0.1.0"
