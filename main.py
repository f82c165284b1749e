"""
Gravybot - Xepher MUSH bot.
Keeps one telnet session open, acknowledges every line and answers URL,
weather, translation and stock requests from other players.
"""
import argparse
import logging
import sys
from typing import List, Optional

from gravybot.application.session import SessionStatus
from gravybot.config import DEFAULT_SERVER_ADDRESS, DEFAULT_YIRP_API_ADDRESS, VERSION, Settings
from gravybot.domain.errors import ConfigurationError
from gravybot.services import build_session
from gravybot.status_server import start_status_server

logger = logging.getLogger("gravybot")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Xepher MUSH bot")
    parser.add_argument("-s", dest="server_address", default=None,
                        help=f"Server:port address (default {DEFAULT_SERVER_ADDRESS})")
    parser.add_argument("-yirpaddr", dest="yirp_api_address", default=None,
                        help=f"Yirp API Address (default {DEFAULT_YIRP_API_ADDRESS})")
    parser.add_argument("--health-port", dest="health_port", type=int, default=None,
                        help="Serve /health, /readiness and /status on this port")
    parser.add_argument("--log-level", dest="log_level", default=None,
                        help="Logging level (default INFO)")
    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        settings = Settings.from_env(**vars(args))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    print("Xepher MUSH Bot version:", VERSION)
    logger.info(f"Settings: {settings.masked()}")

    status = SessionStatus()
    if settings.health_port:
        start_status_server(status, settings.health_port)

    session = build_session(settings, status=status)
    try:
        session.run()
    except OSError as e:
        logger.error(f"❌ Session terminated: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("👋 Interrupted, closing session")
        return 0
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
