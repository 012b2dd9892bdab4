"""Pipeline orchestration for seed imports, indexing and matching runs."""

from .importer import SeedData, import_seed_data, load_seed_file, parse_seed_data
from .models import ImportResult, IndexRunResult, MatchRunResult
from .runner import MatchPipeline, run_indexing

__all__ = [
    "MatchPipeline",
    "run_indexing",
    "MatchRunResult",
    "IndexRunResult",
    "ImportResult",
    "SeedData",
    "load_seed_file",
    "parse_seed_data",
    "import_seed_data",
]
