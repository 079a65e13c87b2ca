"""invoicectl — validated invoice mutations for the dashboard."""

__version__ = "0.1.0"
