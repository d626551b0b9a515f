from .normalize_url import normalize_and_validate, normalize_url, validate_profile_url
from .parse_count import parse_count
from .extract_statistics import extract_statistics, extract_statistics_from_html, soup_labeled_values
from .run_pipeline import PipelineConfig, run_pipeline


__all__ = [
    "normalize_url",
    "validate_profile_url",
    "normalize_and_validate",
    "parse_count",
    "soup_labeled_values",
    "extract_statistics",
    "extract_statistics_from_html",
    "PipelineConfig",
    "run_pipeline"

]
