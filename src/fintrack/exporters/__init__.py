"""Record exporters."""

from .csv_exporter import CSVExporter

__all__ = ["CSVExporter"]
