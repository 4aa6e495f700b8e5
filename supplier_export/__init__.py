"""Paginated supplier-directory export client."""

from .config import ExportConfig
from .errors import ConfigError, FailureKind, PageFailure, PageFetchError, PrimingError
from .orchestrator import RunController, RunState, RunSummary

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ExportConfig",
    "FailureKind",
    "PageFailure",
    "PageFetchError",
    "PrimingError",
    "RunController",
    "RunState",
    "RunSummary",
    "__version__",
]
