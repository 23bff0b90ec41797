"""harbormaster: compose project helper with registry freshness checks."""

__version__ = "0.3.0"
