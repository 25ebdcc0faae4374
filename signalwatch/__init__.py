"""SignalWatch: connectivity monitoring backend with low-signal alerting."""

__version__ = "0.1.0"
