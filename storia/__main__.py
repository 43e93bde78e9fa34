"""
Storia Main Entry Point

Run the autoproduction API or watch a generation job from the terminal.
"""

import sys
import asyncio
import argparse
from dataclasses import replace
from pathlib import Path

from storia.core.config import load_config, set_config, get_config
from storia.core.constants import ProductionKind
from storia.core.exceptions import StoriaError
from storia.core.logging_config import setup_logging, get_logger, LogLevel


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storia",
        description="Storia - autoproduction wizard and generation tracking"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to configuration file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode"
    )

    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write logs to this file"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the autoproduction API")
    serve.add_argument("--host", type=str, default=None, help="Bind address (default from settings)")
    serve.add_argument("--port", type=int, default=None, help="Port for the API server (default from settings)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    watch = subparsers.add_parser("watch", help="Track a generation job until it settles")
    watch.add_argument("campaign_id", type=str, help="Campaign (job) id to track")
    watch.add_argument(
        "--kind",
        choices=[kind.value for kind in ProductionKind],
        default=ProductionKind.STORY.value,
        help="Campaign kind (default: story)"
    )
    watch.add_argument("--base-url", type=str, default=None, help="Generation API base URL")
    watch.add_argument("--interval", type=float, default=None, help="Polling interval in seconds")
    watch.add_argument(
        "--topics",
        nargs="+",
        default=None,
        help="Start generation with these topics before watching"
    )

    return parser


def main(argv=None) -> int:
    """Main entry point for the Storia CLI."""
    args = build_parser().parse_args(argv)

    if args.debug:
        log_level = LogLevel.DEBUG
    elif args.verbose:
        log_level = LogLevel.INFO
    else:
        log_level = LogLevel.WARNING
    setup_logging(
        level=log_level,
        log_file=Path(args.log_file) if args.log_file else None,
        verbose=args.verbose or args.debug
    )

    logger = get_logger("main")

    if args.config:
        config_path = Path(args.config)
        try:
            set_config(load_config(config_path).apply_env_overrides())
            logger.info(f"Loaded configuration from {config_path}")
        except StoriaError as e:
            logger.warning(f"Could not load config: {e}. Using defaults.")

    if args.command == "serve":
        return run_server(args)
    return run_watch(args)


def run_server(args) -> int:
    """Run the FastAPI backend."""
    from storia.api.main import start_server

    logger = get_logger("main")
    logger.info("Starting autoproduction API")
    start_server(host=args.host, port=args.port, reload=args.reload)
    return 0


def run_watch(args) -> int:
    """Poll one job and print each snapshot. Exit code 0 only when it finishes done."""
    logger = get_logger("main")
    try:
        return asyncio.run(watch_job(args))
    except KeyboardInterrupt:
        print("\nStopped watching.")
        return 130
    except StoriaError as e:
        logger.error(str(e))
        print(f"Error: {e.message}")
        return 1


async def watch_job(args) -> int:
    from storia.generation import GenerationAPIClient, GenerationJobTracker, JobStatus

    polling = get_config().polling
    if args.interval is not None:
        polling = replace(polling, interval_seconds=args.interval)

    async with GenerationAPIClient(base_url=args.base_url, kind=ProductionKind(args.kind)) as client:
        job_id = args.campaign_id
        if args.topics:
            job = await client.start_generation(job_id, args.topics)
            job_id = job.job_id
            print(f"Started generation for {job_id}: {job.message or ''}")

        tracker = GenerationJobTracker(client, polling)
        tracker.subscribe(print_snapshot)
        tracker.start(job_id)
        final = await tracker.wait_until_settled()

    if final is None:
        return 1
    if final.error:
        print(f"Error: {final.error}")
    return 0 if final.status == JobStatus.DONE else 1


def print_snapshot(snapshot) -> None:
    line = f"[{snapshot.status.value:>10}] {snapshot.progress:5.1f}%"
    if snapshot.total:
        line += f"  {snapshot.completed}/{snapshot.total} done, {snapshot.failed} failed"
    if snapshot.current_item is not None:
        line += f"  now: {snapshot.current_item.topic}"
    print(line)


if __name__ == "__main__":
    sys.exit(main())
