"""prefix-list-monitor entry point - keeps an EC2 prefix list entry pointed at this host's public IP."""

import argparse
import logging
import os
import sys
import threading

from dotenv import load_dotenv

from prefix_list_monitor.logging_config import configure_logging

load_dotenv(os.getenv("ENV_FILE", ".env"))

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CYCLE_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_reconciler(config, stop_event: threading.Event | None = None):
    """Wire resolver, reader and writer for the configured list."""
    from prefix_list_monitor.prefix_list import PrefixListReader, PrefixListWriter, create_ec2_client
    from prefix_list_monitor.reconciler import Reconciler
    from prefix_list_monitor.resolver import IpResolver

    client = create_ec2_client(config.region, timeout=config.request_timeout)
    return Reconciler(
        resolver=IpResolver(config.ip_service_url, timeout=config.request_timeout),
        reader=PrefixListReader(client),
        writer=PrefixListWriter(client, config.description),
        list_id=config.prefix_list_id,
        description=config.description,
        cidr_suffix=config.cidr_suffix,
        max_attempts=config.max_attempts,
        retry_delay=config.retry_delay,
        stop_event=stop_event,
    )


def run_once(config) -> int:
    """Run a single cycle in the foreground. Exit code reflects the outcome."""
    reconciler = build_reconciler(config)
    try:
        result = reconciler.reconcile_once()
    finally:
        reconciler.close()
    logger.info("Running in once mode, exiting | outcome: %s", result.outcome.value)
    return EXIT_OK if result.outcome.ok else EXIT_CYCLE_FAILED


def run_monitor(config) -> int:
    """Run the scheduler until SIGTERM/SIGINT."""
    from prefix_list_monitor.scheduler.runner import run_forever

    reconciler = build_reconciler(config, stop_event=threading.Event())
    run_forever(reconciler, config.check_interval)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prefix-list-monitor",
        description="Monitor external IP and update AWS VPC prefix list",
    )
    parser.add_argument("-r", "--region", help="AWS region (env: AWS_REGION)")
    parser.add_argument("-p", "--prefix-list-id", help="Prefix list ID to update (env: PREFIX_LIST_ID)")
    parser.add_argument(
        "-d",
        "--description",
        dest="entry_description",
        help="Description marking the managed entry (env: ENTRY_DESCRIPTION)",
    )
    parser.add_argument(
        "-i",
        "--interval",
        dest="check_interval",
        type=int,
        help="Check interval in seconds (env: CHECK_INTERVAL)",
    )
    parser.add_argument("--ip-service", dest="ip_service_url", help="IP detection service URL (env: IP_SERVICE_URL)")
    parser.add_argument("--cidr-suffix", help="CIDR suffix, e.g. 32 for a single host (env: CIDR_SUFFIX)")
    parser.add_argument("--log-level", help="Log level (env: LOG_LEVEL)")
    parser.add_argument("--once", action="store_true", help="Run one check and exit")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    from prefix_list_monitor.config import load_config
    from prefix_list_monitor.errors import ConfigError

    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        config = load_config(
            once=args.once,
            prefix_list_id=args.prefix_list_id,
            aws_region=args.region,
            entry_description=args.entry_description,
            check_interval=args.check_interval,
            ip_service_url=args.ip_service_url,
            cidr_suffix=args.cidr_suffix,
            log_level=args.log_level,
        )
    except ConfigError as e:
        logger.error("%s", e)
        return EXIT_CONFIG_ERROR

    configure_logging(config.log_level)
    logger.info("Starting prefix list monitor")
    logger.info("Prefix List ID: %s", config.prefix_list_id)
    logger.info("Description: %s", config.description)
    logger.info("Check interval: %ds", config.check_interval)
    logger.info("IP service: %s", config.ip_service_url)

    if config.once:
        return run_once(config)
    return run_monitor(config)


if __name__ == "__main__":
    sys.exit(main())
