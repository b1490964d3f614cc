"""json_connector - serialize host/chart/dimension samples into JSON batches."""

__version__ = "0.1.0"
