"""
liveconfig Command-Line Entry Point

Loads a config file, watches it, and logs every reload or error until
interrupted. Unrecognized ``--key value`` arguments become overrides.

    liveconfig app.json --poll-ms 2000 --db.host localhost
"""

import argparse
import asyncio
import json
import signal
import sys
from collections.abc import Sequence

from liveconfig.config.settings import get_settings
from liveconfig.core.overrides import CommandLineOverrides
from liveconfig.core.store import ConfigStore
from liveconfig.utils.exceptions import LiveConfigError
from liveconfig.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="liveconfig",
        allow_abbrev=False,
        description="Watch a JSON config file and report live reloads.",
    )
    parser.add_argument("config_file", help="Path to the config file")
    parser.add_argument("--poll-ms", type=int, default=None, help="Poll interval in milliseconds")
    parser.add_argument("--notify", action="store_true", help="Use OS file notifications instead of polling")
    parser.add_argument("--env", action="store_true", help="Discover hostname and IP address at startup")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("--print", dest="print_config", action="store_true", help="Print the config on every reload")
    return parser


class LiveConfigApplication:
    """Runs one watched store until shutdown."""

    def __init__(self, options: argparse.Namespace, override_args: Sequence[str]):
        self.options = options
        self.override_args = list(override_args)
        self.store: ConfigStore | None = None
        self._shutdown = asyncio.Event()
        self._reload_tasks: set[asyncio.Task] = set()

    async def initialize(self) -> None:
        """Load the store and wire listeners."""
        options = self.options
        self.store = ConfigStore(
            options.config_file,
            watch=options.poll_ms or True,
            overrides=CommandLineOverrides(self.override_args),
            strategy="notify" if options.notify else None,
        )
        self.store.on("reload", self._on_reload)

        if options.env:
            info = await self.store.get_env()
            logger.info("environment", **info.to_dict())

        if options.print_config:
            self._print_config()

    def _on_reload(self) -> None:
        logger.info("config_reloaded", config_file=self.store.config_file)
        if self.options.print_config:
            self._print_config()

    def _print_config(self) -> None:
        print(json.dumps(self.store.get(), indent=2, sort_keys=True), flush=True)

    async def start(self) -> None:
        """Block until a shutdown signal arrives."""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self._request_shutdown, sig)
        if hasattr(signal, "SIGHUP"):
            loop.add_signal_handler(signal.SIGHUP, self._request_reload)

        await self._shutdown.wait()
        await self.shutdown()

    def _request_shutdown(self, signum: int) -> None:
        logger.info("shutdown_requested", signal=signum)
        self._shutdown.set()

    def _request_reload(self) -> None:
        logger.info("reload_requested", signal="SIGHUP")
        task = asyncio.get_running_loop().create_task(self.store.reload())
        self._reload_tasks.add(task)
        task.add_done_callback(self._reload_tasks.discard)

    async def shutdown(self) -> None:
        if self.store is not None:
            self.store.close()
        logger.info("liveconfig_stopped")


async def main(argv: Sequence[str] | None = None) -> int:
    """Main application entry point."""
    options, override_args = build_parser().parse_known_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level, settings.environment, enable_json=options.json_logs)

    try:
        app = LiveConfigApplication(options, override_args)
        await app.initialize()
        await app.start()
    except LiveConfigError as e:
        logger.error("startup_failed", error=str(e))
        return 1
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
