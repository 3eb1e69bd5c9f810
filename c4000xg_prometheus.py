#!/usr/bin/env python3
"""
Prometheus exporter for CenturyLink C4000XG modem metrics.

Every scrape of /metrics logs in to the modem, fetches hosts, WiFi access
points, SSIDs, radios, ethernet interfaces and temperature sensors, joins
them and exports every numeric field as a counter or gauge.
"""

from __future__ import annotations

import argparse
import logging
import os
import time
from typing import Callable, List, Mapping, Optional

from dotenv import load_dotenv
from prometheus_client import CollectorRegistry, Counter, Histogram, start_http_server

import c4000xg_client
from c4000xg_client_exceptions import ConfigException
from c4000xg_models import ExporterConfig, LabeledSample
from c4000xg_normalizer import MetricNormalizer
from c4000xg_prometheus_utils import describe_families, group_samples

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Metrics Registry
registry = CollectorRegistry()

# Scrape duration and errors
scrape_duration_seconds = Histogram(
    "c4000xg_exporter_scrape_duration_seconds",
    "Time spent scraping modem metrics",
    registry=registry
)

scrape_errors_total = Counter(
    "c4000xg_exporter_scrape_errors_total",
    "Total number of scrape errors",
    registry=registry
)


class DeviceCollector:
    """Custom collector that scrapes the modem whenever /metrics is pulled."""

    def __init__(self, host: str, username: str, password: str, namespace: str,
                 client_factory: Optional[Callable[[str], c4000xg_client.DeviceClientFactory]] = None):
        self.host = host
        self.username = username
        self.password = password
        self.normalizer = MetricNormalizer(namespace)
        self.client_factory = client_factory or c4000xg_client.DeviceClientFactory

    def describe(self):
        # Shapes are discovered by collect(); empty until the first scrape
        return describe_families(self.normalizer.cache.descriptors())

    def scrape(self) -> List[LabeledSample]:
        """Run one full login, fetch, join cycle. Raises on any fetch error."""
        client = self.client_factory(self.host).auth(self.username, self.password)
        with client:
            snapshot = client.scrape()
        samples = self.normalizer.normalize(snapshot)
        logger.debug(f"Scraped {len(samples)} samples from {self.host}")
        return samples

    def collect(self):
        with scrape_duration_seconds.time():
            try:
                samples = self.scrape()
            except Exception as e:
                logger.error(f"Error collecting metrics: {e}")
                scrape_errors_total.inc()
                raise
        yield from group_samples(samples)


def create_app(config: ExporterConfig):
    """
    Create and configure the Prometheus metrics exporter.

    Args:
        config: Modem connection and exporter settings

    Returns:
        Callable that starts the exporter
    """

    def app():
        logger.info("Starting prometheus-centurylink-c4000xg-exporter")
        logger.info(f"Scraping modem at {config.modem_host} as {config.modem_user}")

        collector = DeviceCollector(config.modem_host, config.modem_user,
                                    config.modem_password, config.metrics_namespace)
        registry.register(collector)

        start_http_server(config.port, registry=registry)
        logger.info(f"Metrics available at http://localhost:{config.port}/metrics")

        # Scrapes happen on demand in the HTTP server threads
        try:
            while True:
                time.sleep(3600)
        except KeyboardInterrupt:
            logger.info("Shutting down exporter")

    return app


def build_parser(environ: Optional[Mapping[str, str]] = None) -> argparse.ArgumentParser:
    environ = os.environ if environ is None else environ

    parser = argparse.ArgumentParser(
        description="Prometheus exporter for CenturyLink C4000XG modem metrics",
        epilog="Environment variables can be used as defaults: "
               "MODEM_HOST, MODEM_USER, MODEM_PASSWORD, METRICS_NAMESPACE, PORT, LOG_LEVEL"
    )
    parser.add_argument(
        "--modem-host",
        default=environ.get("MODEM_HOST", "192.168.0.1"),
        help="Modem host or IP address (default: 192.168.0.1) [env: MODEM_HOST]"
    )
    parser.add_argument(
        "--modem-user",
        default=environ.get("MODEM_USER", "admin"),
        help="Modem admin username (default: admin) [env: MODEM_USER]"
    )
    parser.add_argument(
        "--modem-password",
        default=environ.get("MODEM_PASSWORD"),
        help="Modem admin password [env: MODEM_PASSWORD]"
    )
    parser.add_argument(
        "--metrics-namespace",
        default=environ.get("METRICS_NAMESPACE", "c4000xg"),
        help="Prefix of every exported metric name (default: c4000xg) [env: METRICS_NAMESPACE]"
    )
    parser.add_argument(
        "--port",
        default=environ.get("PORT", "9998"),
        help="Port to expose Prometheus metrics on (default: 9998) [env: PORT]"
    )
    parser.add_argument(
        "--log-level",
        default=environ.get("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO) [env: LOG_LEVEL]"
    )
    return parser


def parse_config(args: argparse.Namespace) -> ExporterConfig:
    if not args.modem_password:
        raise ConfigException("--modem-password is required or set MODEM_PASSWORD environment variable")
    try:
        port = int(args.port)
    except ValueError as e:
        raise ConfigException(f"Invalid value in $PORT: {args.port!r}") from e
    if not args.metrics_namespace:
        raise ConfigException("Metrics namespace must not be empty")

    return ExporterConfig(
        modem_host=args.modem_host,
        modem_user=args.modem_user,
        modem_password=args.modem_password,
        metrics_namespace=args.metrics_namespace,
        port=port,
        log_level=args.log_level,
    )


def main():
    """Main entry point for the Prometheus exporter."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args()
    try:
        config = parse_config(args)
    except ConfigException as e:
        parser.error(str(e))

    # Set logging level
    logging.getLogger().setLevel(getattr(logging, config.log_level))

    app = create_app(config)
    app()


if __name__ == "__main__":
    main()
