"""Command-line entry point for the community directory."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import Any, List, Optional, Tuple

from community_os.config.environment import EnvironmentConfig
from community_os.config.exceptions import ConfigurationError
from community_os.config.loader import load_config
from community_os.config.models import AppConfig
from community_os.domain import profile_to_payload
from community_os.enrichment import EmbeddingEnricher
from community_os.logging import get_logger
from community_os.logging.config import configure_logging
from community_os.matching import PairwiseMatcher, build_match_payload
from community_os.persistence import (
    ProfileRepository,
    RecordNotFoundError,
    SQLVectorStore,
    close_database,
    get_session,
    init_database,
)
from community_os.providers import ProviderError, build_providers
from community_os.search import AgenticSearch, is_search_error

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """Load configuration and settle the effective log level.

    Log level priority: CLI flag > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def parse_ids(value: str) -> List[int]:
    """Parse "1,2,3" into [1, 2, 3]."""
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected comma-separated integers, got: {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Community OS - participant directory with agentic search and coffee roulette"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Natural-language search over profiles")
    search.add_argument("query", help="Search query, e.g. 'rust developers who like hiking'")
    search.add_argument("--limit", type=int, default=None, help="Number of results (max 20)")
    search.add_argument(
        "--exclude-unavailable",
        action="store_true",
        help="Hide participants whose status is red",
    )
    search.add_argument("--threshold", type=float, default=None, help="Similarity threshold 0..1")
    search.add_argument("--debug", action="store_true", help="Include timings and raw scores")

    match = commands.add_parser("match", help="Coffee roulette suggestions for one profile")
    match.add_argument("profile_id", type=int)
    match.add_argument("--max-results", type=int, default=None)
    match.add_argument("--exclude", type=int, nargs="*", default=[], help="Profile ids to skip")
    match.add_argument(
        "--include-unavailable",
        action="store_true",
        help="Also suggest participants whose status is red",
    )

    intro = commands.add_parser("intro", help="Draft an introduction message")
    intro.add_argument("profile_id", type=int, help="Participant being introduced")
    target = intro.add_mutually_exclusive_group(required=True)
    target.add_argument("--target", type=int, help="Participant to introduce them to")
    target.add_argument("--audience", help="Free-text description of the audience")

    status = commands.add_parser("status", help="Set a participant's traffic-light status")
    status.add_argument("profile_id", type=int)
    status.add_argument("status", choices=["green", "yellow", "red"])
    status.add_argument("--text", default=None, help="Availability text")

    enrich = commands.add_parser("enrich", help="Generate missing profile embeddings")
    enrich.add_argument("--all", action="store_true", help="Regenerate existing embeddings too")
    enrich.add_argument("--ids", type=parse_ids, default=None, help="Comma-separated profile ids")

    browse = commands.add_parser("list", help="Browse participants, newest first")
    browse.add_argument("--search", default=None, help="Case-insensitive name substring")
    browse.add_argument("--skill", default=None, help="Exact skill the participant lists")
    browse.add_argument("--limit", type=int, default=50, help="Maximum participants shown")

    show = commands.add_parser("show", help="Show one participant")
    show.add_argument("profile_id", type=int)

    commands.add_parser("skills", help="Every distinct skill in the directory")
    commands.add_parser("stats", help="Directory statistics")

    return parser


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def run_search(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    providers = build_providers(app_config, env_config)
    engine = AgenticSearch(
        embedding_provider=providers.embeddings,
        vector_store=SQLVectorStore(),
        explainer=providers.explainer,
        settings=app_config.search,
    )
    options = engine.default_options(
        limit=args.limit,
        match_threshold=args.threshold,
        exclude_unavailable=args.exclude_unavailable,
        include_debug=args.debug,
    )

    result = engine.search(args.query, options)
    _print_json(result.to_dict())
    return 1 if is_search_error(result) else 0


def run_match(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    with get_session() as session:
        repo = ProfileRepository(session)
        source = repo.get_by_id(args.profile_id)
        if source is None:
            raise RecordNotFoundError(f"Profile with id {args.profile_id} not found")
        pool = repo.list_all()

    matcher = PairwiseMatcher(app_config.matching)
    options = matcher.default_options(
        exclude_ids=set(args.exclude),
        max_results=args.max_results,
        exclude_unavailable=False if args.include_unavailable else None,
    )
    matches = matcher.find_matches(source, pool, options)
    _print_json([build_match_payload(match) for match in matches])
    return 0


def run_intro(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    with get_session() as session:
        repo = ProfileRepository(session)
        source = repo.get_by_id(args.profile_id)
        if source is None:
            raise RecordNotFoundError(f"Profile with id {args.profile_id} not found")
        target = None
        if args.target is not None:
            target = repo.get_by_id(args.target)
            if target is None:
                raise RecordNotFoundError(f"Profile with id {args.target} not found")

    providers = build_providers(app_config, env_config)
    intro = providers.intro.generate(source, target=target, target_description=args.audience)
    print(intro.message)
    return 0


def run_status(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    with get_session() as session:
        profile = ProfileRepository(session).update_status(args.profile_id, args.status, args.text)
    _print_json({"id": profile.id, "status": profile.status_tag.value, "label": profile.status_tag.label})
    return 0


def run_enrich(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    providers = build_providers(app_config, env_config)
    result = EmbeddingEnricher(providers.embeddings).run(force=args.all, profile_ids=args.ids)
    _print_json(
        {
            "processed": result.processed,
            "skipped": result.skipped,
            "failed": result.failed,
            "errors": {str(profile_id): message for profile_id, message in result.errors.items()},
        }
    )
    return 1 if result.had_errors else 0


def run_list(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    if args.limit < 1:
        raise ValueError(f"--limit must be at least 1, got {args.limit}")

    with get_session() as session:
        profiles = ProfileRepository(session).list_profiles(
            search=args.search, skill=args.skill, limit=args.limit
        )
    _print_json([profile_to_payload(profile) for profile in profiles])
    return 0


def run_show(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    with get_session() as session:
        profile = ProfileRepository(session).get_by_id(args.profile_id)
    if profile is None:
        raise RecordNotFoundError(f"Profile with id {args.profile_id} not found")
    _print_json(profile_to_payload(profile))
    return 0


def run_skills(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    with get_session() as session:
        skills = ProfileRepository(session).list_all_skills()
    _print_json(skills)
    return 0


def run_stats(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    with get_session() as session:
        repo = ProfileRepository(session)
        payload = {
            "totalProfiles": repo.count(),
            "statusCounts": repo.get_status_counts(),
            "topSkills": [{"skill": skill, "count": count} for skill, count in repo.get_top_skills()],
        }
    _print_json(payload)
    return 0


COMMANDS = {
    "search": run_search,
    "match": run_match,
    "intro": run_intro,
    "status": run_status,
    "enrich": run_enrich,
    "stats": run_stats,
    "list": run_list,
    "show": run_show,
    "skills": run_skills,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        # Command output goes to stdout, so logs go to stderr
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
            stream=sys.stderr,
        )

        logger.info(
            "Command starting",
            extra={
                "event": "cli.command.starting",
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
            "Command finished",
            extra={
                "event": "cli.command.finished",
                "command": args.command,
                "exit_code": exit_code,
                "duration_seconds": round(time.time() - start_time, 2),
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except RecordNotFoundError as e:
        print(f"Not found: {e}", file=sys.stderr)
        return 1
    except ProviderError as e:
        print(f"Provider error: {e}", file=sys.stderr)
        logger.error(
            f"Provider error: {e}",
            extra={"event": "cli.provider.failed", "error_type": type(e).__name__},
        )
        return 1
    except ValueError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            extra={
                "event": "cli.command.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
