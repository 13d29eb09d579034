"""Service layer: catalog engines, loading and application infrastructure."""

from .aggregation import (
    all_games,
    all_wattages,
    averaged_fps,
    default_wattage,
    devices_by_igpu,
    devices_by_processor,
    fps_lookup,
    game_options,
    perf_avg,
    perf_p1,
    soc_options,
    unique_igpus,
    unique_processors,
    unique_sorted,
    wattage_options,
)
from .catalog_loader import (
    fetch_catalog,
    load_bundled_catalog,
    load_catalog_file,
    parse_catalog,
    parse_device,
)
from .charts import (
    BarRow,
    LineRow,
    device_bar_rows,
    device_line_rows,
    group_bar_rows,
    group_line_rows,
)
from .comparison import (
    COMPARISON_METRICS,
    ComparisonCell,
    ComparisonRow,
    MetricDescriptor,
    Polarity,
    best_value,
    compare_devices,
    comparison_table,
    is_best,
)
from .config import ConfigurationService, ValidationResult
from .errors import (
    AppError,
    CatalogError,
    ConfigurationError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    FileSystemError,
    NetworkError,
    UserFriendlyError,
    ValidationError,
    get_error_service,
    handle_error,
)
from .filtering import (
    collect_reviews,
    filter_devices,
    filter_processors,
    filter_reviews,
    matches_query,
)
from .http_client import HttpClientService

__all__ = [
    "AppError",
    "BarRow",
    "COMPARISON_METRICS",
    "CatalogError",
    "ComparisonCell",
    "ComparisonRow",
    "ConfigurationError",
    "ConfigurationService",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "FileSystemError",
    "HttpClientService",
    "LineRow",
    "MetricDescriptor",
    "NetworkError",
    "Polarity",
    "UserFriendlyError",
    "ValidationError",
    "ValidationResult",
    "all_games",
    "all_wattages",
    "averaged_fps",
    "best_value",
    "collect_reviews",
    "compare_devices",
    "comparison_table",
    "default_wattage",
    "device_bar_rows",
    "device_line_rows",
    "devices_by_igpu",
    "devices_by_processor",
    "fetch_catalog",
    "filter_devices",
    "filter_processors",
    "filter_reviews",
    "fps_lookup",
    "game_options",
    "get_error_service",
    "group_bar_rows",
    "group_line_rows",
    "handle_error",
    "is_best",
    "load_bundled_catalog",
    "load_catalog_file",
    "matches_query",
    "parse_catalog",
    "parse_device",
    "perf_avg",
    "perf_p1",
    "soc_options",
    "unique_igpus",
    "unique_processors",
    "unique_sorted",
    "wattage_options",
]
