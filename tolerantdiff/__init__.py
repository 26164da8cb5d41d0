"""
tolerantdiff - Customizable equality for test assertions

Deep comparison of arbitrary values and structural diffing of JSON
documents, with pluggable comparators for values of basic types (numeric
tolerances, time tolerances, string normalization).
"""

from .comparators import (
    BasicEqualer,
    StringTransformer,
    ExactEqualer,
    TolerantEqualer,
    TimeEqualer,
    TolerantBasicEqualer,
    SubstringDeleter,
    make_substring_deleter,
)
from .deep import DeepEqualer, equal
from .differ import JSONDiffer, compare
from .formatter import AsciiFormatter, format_diff
from .models import (
    ComparatorConfig,
    Delta,
    DeltaKind,
    DiffResult,
    ValueKind,
)
from .exceptions import (
    TolerantDiffError,
    ParseError,
    IntrospectionError,
    ConfigError,
)
from .config import load_config, build_differ
from .runner import (
    DatasetRunner,
    ScenarioResult,
    GlobalReport,
    run_datasets,
)

__version__ = "1.0.0"
__all__ = [
    # Leaf comparators
    "BasicEqualer",
    "StringTransformer",
    "ExactEqualer",
    "TolerantEqualer",
    "TimeEqualer",
    "TolerantBasicEqualer",
    "SubstringDeleter",
    "make_substring_deleter",
    # Deep equality
    "DeepEqualer",
    "equal",
    # JSON diff
    "JSONDiffer",
    "compare",
    "AsciiFormatter",
    "format_diff",
    "Delta",
    "DeltaKind",
    "DiffResult",
    "ValueKind",
    # Errors
    "TolerantDiffError",
    "ParseError",
    "IntrospectionError",
    "ConfigError",
    # Configuration
    "ComparatorConfig",
    "load_config",
    "build_differ",
    # Dataset runner
    "DatasetRunner",
    "ScenarioResult",
    "GlobalReport",
    "run_datasets",
]
