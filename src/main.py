"""Command line entry point.

    python -m src.main once [--output-dir DIR]   run one refresh, export views
    python -m src.main serve [--host H --port P] run the dashboard web API
"""

import argparse
import asyncio
import logging
import os
import sys

from src.core.config import Config
from src.dashboard import Dashboard
from src.shell.config_loader import load_config, load_config_from_env


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_config(config_path: str | None = None) -> Config:
    """Load configuration from file or environment."""
    config_path = config_path or os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.environ.get("TIME_WINDOW") or os.environ.get("MIN_MAGNITUDE"):
        # Simple env-based config
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


async def run_once(config: Config, output_dir: str) -> int:
    """Run one refresh cycle and export the views.

    Returns:
        Process exit code
    """
    dashboard = Dashboard(config)
    try:
        dashboard.scheduler.trigger()
        await dashboard.scheduler.wait_idle()

        result = dashboard.orchestrator.last_result
        if result is None or not result.success:
            logger.error("Refresh failed: %s", result.error if result else "no cycle ran")
            return 1

        for path in await asyncio.to_thread(dashboard.export, output_dir):
            print(path)
        return 0
    finally:
        await dashboard.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="USGS earthquake dashboard")
    parser.add_argument("--config", help="Path to YAML config file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    once = subparsers.add_parser("once", help="Run one refresh and export the views")
    once.add_argument("--output-dir", help="Directory for chart.html, table.html, map.png")
    once.add_argument("--time-window", help="hour, day, week or month")
    once.add_argument("--min-magnitude", help="all, 1.0, 2.5, 4.5 or significant")

    serve = subparsers.add_parser("serve", help="Run the dashboard web API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    if args.command == "serve":
        import uvicorn

        # The app loads its own config at startup
        if args.config:
            os.environ["CONFIG_PATH"] = args.config

        uvicorn.run("api.main:app", host=args.host, port=args.port)
        return 0

    config = _get_config(args.config)
    if args.time_window:
        config.time_window = args.time_window
    if args.min_magnitude:
        config.min_magnitude = args.min_magnitude

    return asyncio.run(run_once(config, args.output_dir or config.output_dir))


if __name__ == "__main__":
    sys.exit(main())
