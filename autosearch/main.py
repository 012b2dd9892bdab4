"""Main entry point for the Auto Search matching CLI."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from autosearch.config.environment import EnvironmentConfig
from autosearch.config.exceptions import ConfigurationError
from autosearch.config.loader import load_config
from autosearch.config.models import AppConfig
from autosearch.embeddings import EmbeddingProvider, build_embedding_provider
from autosearch.logging import get_logger
from autosearch.logging.config import configure_logging
from autosearch.matching.exceptions import (
    CandidateNotFound,
    EmbeddingUnavailable,
    MatchingCancelled,
    MatchingError,
)
from autosearch.matching.utils import (
    build_match_payload,
    build_result_payload,
    format_match_list,
    format_shortlist,
)
from autosearch.persistence.database import close_database, init_database
from autosearch.persistence.exceptions import PersistenceError
from autosearch.pipeline import (
    MatchPipeline,
    MatchRunResult,
    import_seed_data,
    load_seed_file,
    run_indexing,
)
from autosearch.reranking import build_chat_client

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NOT_READY = 2
EXIT_INTERRUPTED = 130


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and prepare runtime configuration.

    Args:
        config_path: Path to configuration file (None searches default locations)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with the effective log level set

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def build_provider(app_config: AppConfig, env_config: EnvironmentConfig) -> EmbeddingProvider:
    """Create the configured embedding provider.

    Raises:
        ConfigurationError: If the provider cannot be created
    """
    settings = app_config.embeddings
    try:
        return build_embedding_provider(
            settings.provider,
            model=settings.model,
            dimension=settings.dimension,
            api_key=env_config.openai_api_key,
            timeout=app_config.llm.timeout_seconds,
        )
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid embedding provider settings: {e}",
            suggestions=[
                "Set OPENAI_API_KEY in .env",
                "Or set embeddings.provider to 'hashing' for offline use",
            ],
        )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="autosearch",
        description="Auto Search - rank job postings for a candidate with vectors, "
        "heuristics and an LLM re-ranker",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser(
        "import", help="Load candidates, preferences and jobs from a YAML seed file"
    )
    import_parser.add_argument("file", type=Path, help="Path to the seed file")
    import_parser.add_argument(
        "--index",
        action="store_true",
        help="Build missing embeddings after importing",
    )

    index_parser = subparsers.add_parser("index", help="Build stored embedding vectors")
    index_parser.add_argument(
        "--jobs-only", action="store_true", help="Index jobs but not candidate profiles"
    )
    index_parser.add_argument(
        "--all", action="store_true", help="Re-embed entities that already have a vector"
    )

    match_parser = subparsers.add_parser("match", help="Rank jobs for a candidate")
    match_parser.add_argument("candidate_id", help="Candidate profile identity")
    match_parser.add_argument(
        "--no-rerank", action="store_true", help="Return heuristic matches without the LLM"
    )
    match_parser.add_argument(
        "--top-k", type=int, default=None, help="Number of jobs to return"
    )
    match_parser.add_argument(
        "--format",
        dest="output_format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    return parser


def render_match_result(result: MatchRunResult, output_format: str) -> str:
    """Render a match run for stdout."""
    if output_format == "json":
        items = (
            [build_result_payload(item) for item in result.results]
            if result.reranked
            else [build_match_payload(match) for match in result.matches]
        )
        return json.dumps(
            {
                "runId": result.run_id,
                "candidateId": result.candidate_id,
                "reranked": result.reranked,
                "results": items,
            },
            indent=2,
            ensure_ascii=False,
        )

    if result.reranked:
        return format_shortlist(result.results)
    return format_match_list(result.matches)


def _run_import(args, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    data = load_seed_file(args.file)
    result = import_seed_data(data)
    print(
        f"Imported {result.candidates} candidates, {result.preferences} preferences, "
        f"{result.jobs} jobs"
    )

    if args.index:
        index_result = run_indexing(build_provider(app_config, env_config))
        print(
            f"Indexed {index_result.jobs_indexed} jobs, "
            f"{index_result.candidates_indexed} candidates"
        )
        return EXIT_FAILURE if index_result.had_errors else EXIT_OK
    return EXIT_OK


def _run_index(args, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    result = run_indexing(
        build_provider(app_config, env_config),
        include_candidates=not args.jobs_only,
        only_missing=not args.all,
    )
    print(
        f"Indexed {result.jobs_indexed}/{result.jobs_pending} jobs, "
        f"{result.candidates_indexed}/{result.candidates_pending} candidates"
    )
    return EXIT_FAILURE if result.had_errors else EXIT_OK


def _run_match(args, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    if args.top_k is not None and args.top_k < 1:
        raise ConfigurationError("--top-k must be at least 1")

    rerank = not args.no_rerank
    chat_client = build_chat_client(app_config.llm, env_config.openai_api_key) if rerank else None
    pipeline = MatchPipeline(
        app_config=app_config,
        env_config=env_config,
        provider=build_provider(app_config, env_config),
        chat_client=chat_client,
    )

    try:
        result = pipeline.run(args.candidate_id, rerank=rerank, top_k=args.top_k)
    except (CandidateNotFound, EmbeddingUnavailable) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.warning(
            f"Candidate {args.candidate_id} cannot be matched: {e}",
            extra={"event": "matching.run.rejected", "error_type": type(e).__name__},
        )
        return EXIT_NOT_READY

    print(render_match_result(result, args.output_format))
    return EXIT_OK


COMMANDS = {
    "import": _run_import,
    "index": _run_index,
    "match": _run_match,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for Auto Search.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 on success, 1 on configuration, storage or matching
        failures, 2 when the candidate is unknown or not ready for matching
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            f"Auto Search {args.command} starting",
            extra={
                "event": "cli.starting",
                "command": args.command,
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
            },
        )

        init_database(env_config.database_url)
        try:
            exit_code = COMMANDS[args.command](args, app_config, env_config)
        finally:
            close_database()

        logger.info(
            f"Auto Search {args.command} finished",
            extra={
                "event": "cli.finished",
                "command": args.command,
                "exit_code": exit_code,
                "duration_seconds": round(time.time() - start_time, 2),
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e.message}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return EXIT_FAILURE
    except MatchingCancelled:
        print("Matching cancelled", file=sys.stderr)
        return EXIT_INTERRUPTED
    except (MatchingError, PersistenceError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(
            f"{args.command} failed: {e}",
            extra={"event": "cli.failed", "error_type": type(e).__name__},
        )
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            f"Fatal error during {args.command}",
            extra={
                "event": "cli.fatal",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
