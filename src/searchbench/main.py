#!/usr/bin/env python3
"""
Command-line entry point for the search latency benchmark.

Runs N sequential search requests against the configured service and
prints the mean and percentile latencies in nanoseconds:

    searchbench 500 --url http://localhost:9200 --operation filtered
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional, TextIO

import httpx

from searchbench.core.config import (
    DEFAULT_RUNS,
    BenchConfig,
    ClientPolicy,
    FailurePolicy,
    OperationKind,
)
from searchbench.core.errors import ConfigurationError, EmptySampleError, NoSuccessfulTrialsError
from searchbench.core.logging import BenchContext, configure_structlog, get_logger
from searchbench.harness import Report, TrialRunner, build_report, render_report, save_report
from searchbench.operations import build_operation

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_NO_SAMPLES = 1
EXIT_CONFIG_ERROR = 2
EXIT_OUTPUT_ERROR = 3
EXIT_INTERRUPTED = 130

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="searchbench",
        description="Measure search request latency over sequential trials",
    )
    parser.add_argument("runs", nargs="?", type=int, default=DEFAULT_RUNS,
                        help=f"Number of trials (default: {DEFAULT_RUNS})")
    parser.add_argument("--operation", choices=[k.value for k in OperationKind],
                        default=OperationKind.SEARCH.value, help="Operation to benchmark")
    parser.add_argument("--url", default=None, help="Search service base URL")
    parser.add_argument("--index", default=None, help="Index name")
    parser.add_argument("--doc-type", default=None, help="Document type")
    parser.add_argument("--query", default=None, help="query_string query")
    parser.add_argument("--size", type=int, default=None, help="Number of hits to request")
    parser.add_argument("--fresh-client", action="store_true",
                        help="Build a new HTTP client for every trial")
    parser.add_argument("--no-keep-alive", action="store_true",
                        help="Send Connection: close")
    parser.add_argument("--gzip", action="store_true", help="Accept gzip responses")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Per-request timeout in seconds (default: wait)")
    parser.add_argument("--exclude-failures", action="store_true",
                        help="Leave failed trials out of the statistics")
    parser.add_argument("--output", default=None, help="Also write the report as JSON")
    parser.add_argument("--log-level", default="WARNING", type=str.upper, choices=LOG_LEVELS,
                        help="Log level")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    return parser


def config_from_args(args: argparse.Namespace) -> BenchConfig:
    return BenchConfig.from_sources(
        runs=args.runs,
        operation=args.operation,
        url=args.url,
        index=args.index,
        doc_type=args.doc_type,
        query=args.query,
        size=args.size,
        client_policy=ClientPolicy.FRESH if args.fresh_client else ClientPolicy.REUSE,
        keep_alive=not args.no_keep_alive,
        gzip=args.gzip,
        timeout=args.timeout,
        failure_policy=FailurePolicy.EXCLUDE if args.exclude_failures else FailurePolicy.INCLUDE,
        output=args.output,
    )


def run_benchmark(config: BenchConfig,
                  transport: Optional[httpx.BaseTransport] = None,
                  stream: Optional[TextIO] = None) -> Report:
    """Run the configured trials, then save (optionally) and render the report.

    Raises:
        NoSuccessfulTrialsError: if every trial failed; nothing is rendered.
    """
    with BenchContext(operation=config.operation.value, runs=config.runs):
        with build_operation(config, transport=transport) as operation:
            samples = TrialRunner(operation, config.runs).run()

        if samples.succeeded == 0:
            raise NoSuccessfulTrialsError(
                f"no trial succeeded: all {len(samples)} trials failed",
                total_trials=len(samples),
                failed_trials=samples.failed,
            )

        report = build_report(samples, config.failure_policy)

        if config.output:
            save_report(report, config.output)

        render_report(report, stream)

    return report


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    configure_structlog(log_level=args.log_level, json_format=args.json_logs)

    try:
        config = config_from_args(args)
        logger.info("Benchmark configured", operation=config.operation.value,
                    runs=config.runs, url=config.url)
        run_benchmark(config)

    except ConfigurationError as e:
        logger.error("Configuration error", error=str(e))
        print(f"searchbench: configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    except EmptySampleError as e:
        logger.error("No usable samples", error=str(e),
                     total_trials=e.total_trials, failed_trials=e.failed_trials)
        print(f"searchbench: {e}", file=sys.stderr)
        return EXIT_NO_SAMPLES

    except OSError as e:
        logger.error("Could not write report", error=str(e), path=args.output)
        print(f"searchbench: could not write report: {e}", file=sys.stderr)
        return EXIT_OUTPUT_ERROR

    except KeyboardInterrupt:
        logger.info("Benchmark interrupted by user")
        return EXIT_INTERRUPTED

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
