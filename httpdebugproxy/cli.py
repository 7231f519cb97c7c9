"""Command line entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os

from dotenv import find_dotenv, load_dotenv

from . import server
from .config import ConfigError, load_config

log = logging.getLogger("httpdebugproxy")

DEFAULT_CONFIG = "./config.yaml"


def _configure_logging() -> None:
    level_name = os.environ.get("HDP_LOG_LEVEL", "ERROR").upper()
    level = getattr(logging, level_name, logging.ERROR)
    if not isinstance(level, int):
        level = logging.ERROR
    logging.basicConfig(format="%(levelname)s %(name)s > %(message)s")
    log.setLevel(level)


async def _run() -> None:
    config_path = os.environ.get("HDP_CONFIG", DEFAULT_CONFIG)
    log.debug("Loading config %r...", config_path)
    config = load_config(config_path)
    log.info("Starting proxy on %s:%s...", config.server.host, config.server.port)
    await server.run(config)


def main(argv: list[str] | None = None) -> int:
    """Load the configuration named by HDP_CONFIG and serve the proxy."""
    parser = argparse.ArgumentParser(
        prog="httpdebugproxy",
        description="HTTP proxy that prints every request and response it forwards. "
        "The configuration file is taken from HDP_CONFIG (default ./config.yaml).",
    )
    parser.parse_args(argv)

    load_dotenv(find_dotenv(usecwd=True))
    _configure_logging()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        pass
    except (OSError, ConfigError) as exc:
        log.error("%r", exc)
        return 1
    log.info("Done")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())