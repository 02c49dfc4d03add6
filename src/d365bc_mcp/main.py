"""
Business Central MCP Server

Main entry point for the Dynamics 365 Business Central MCP server.
"""

import argparse
import logging
import sys
from typing import Optional
import structlog

from .config import load_dotenv_if_exists
from .server_factory import ServerFactory, ServerValidator

logger = structlog.get_logger(__name__)

# Third-party loggers that would otherwise log every HTTP exchange
NOISY_LOGGERS = ("httpx", "httpcore", "azure", "mcp", "fastmcp")


def configure_logging(log_level: str = "info") -> None:
    """Configure structured logging on top of the stdlib root logger"""
    # stdout carries the STDIO transport, diagnostics go to stderr
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(message)s",
        stream=sys.stderr,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def main() -> Optional[int]:
    """Main entry point with command line argument parsing"""
    # Load environment variables
    load_dotenv_if_exists()

    parser = argparse.ArgumentParser(description="Business Central MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio"],
        default="stdio",
        help="Transport mode (currently only stdio supported)",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: info)",
    )
    parser.add_argument(
        "--validate-config", action="store_true", help="Validate configuration and exit"
    )

    args = parser.parse_args()

    configure_logging(args.log_level)

    if args.validate_config:
        return 0 if ServerValidator.validate_configuration() else 1

    try:
        client = ServerFactory.create_client()
    except Exception as e:
        logger.error("Failed to initialize client", error=str(e))
        return 1

    with client:
        try:
            mcp = ServerFactory.create_configured_server(client)
        except Exception as e:
            logger.error("Failed to initialize server", error=str(e))
            return 1

        mcp.run(transport="stdio")

    logger.info("Business Central MCP Server stopped")
    return 0


if __name__ == "__main__":
    exit_code = main()
    exit(exit_code or 0)
