"""Command line entry point for the helm language server."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import Optional

from helmls import __version__
from helmls.config import LOG_LEVELS, ServerConfig
from helmls.errors import ConfigError

_LEVEL_MAP = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}


def configure_logging(level: str) -> logging.Logger:
    """Send ``helmls`` logs to stderr; stdout carries the protocol."""

    logger = logging.getLogger('helmls')
    logger.setLevel(_LEVEL_MAP.get(level, logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='helmls', description='Helm chart template language server')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--log-level', choices=LOG_LEVELS, default=None, help='Logging verbosity (default: info)')
    parser.add_argument('--helm', dest='helm_command', default=None, help='helm executable to query chart metadata')
    parser.add_argument('--no-chart', action='store_true', help='Skip loading chart values and metadata')
    parser.add_argument('--tcp', action='store_true', help='Serve over TCP instead of stdio')
    parser.add_argument('--host', default='127.0.0.1', help='TCP host (with --tcp)')
    parser.add_argument('--port', type=int, default=2087, help='TCP port (with --tcp)')
    return parser


def resolve_config(args: argparse.Namespace) -> ServerConfig:
    config = ServerConfig.from_env()
    if args.log_level:
        config = replace(config, log_level=args.log_level)
    if args.helm_command:
        config = replace(config, helm_command=args.helm_command)
    if args.no_chart:
        config = replace(config, load_chart=False)
    return config


def main(argv: Optional[list] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = resolve_config(args)
    except ConfigError as exc:
        parser.error(exc.format())
    logger = configure_logging(config.log_level)

    from helmls.lsp.server import create_server

    server = create_server(config)
    if args.tcp:
        logger.info("Starting helm language server on %s:%s", args.host, args.port)
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting helm language server over stdio")
        server.start_io()


__all__ = ["main", "build_parser", "configure_logging", "resolve_config"]
