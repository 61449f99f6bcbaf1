"""Command-line entry point and small application-level helpers."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence
from urllib.parse import urlsplit

from xenocontrol.config_files import create_config_dir
from xenocontrol.devices import SUPPORTED_DEVICES_FILE, load_or_create_config
from xenocontrol.mapping import MappingStore
from xenocontrol.settings import load_settings

log = logging.getLogger(__name__)

APP_TITLE = "XenoControl"

_PLATFORMS = {"win32": "windows", "cygwin": "windows", "darwin": "macos"}


def get_platform() -> str:
    """Return the operating system name: "linux", "windows", "macos" and so on."""
    platform = sys.platform
    if platform.startswith("linux"):
        return "linux"
    if platform.startswith("freebsd"):
        return "freebsd"
    return _PLATFORMS.get(platform, platform)


def open_url(url: str) -> str:
    """Check that ``url`` can be opened and return it for the front end to open.

    Raises ``ValueError`` when the URL is empty or lacks a scheme or target.
    """
    if not url or not url.strip():
        raise ValueError("empty URL")
    url = url.strip()
    parts = urlsplit(url)
    if not parts.scheme:
        raise ValueError(f"URL has no scheme: {url}")
    if not (parts.netloc or parts.path):
        raise ValueError(f"URL has no target: {url}")
    log.debug("open_url requested: %s", url)
    return url


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="xenocontrol", description=APP_TITLE)
    parser.add_argument(
        "command",
        nargs="?",
        default="init",
        choices=["init", "settings", "devices", "mappings", "platform"],
        help="what to show after initialising the configuration",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Initialise the configuration and print the requested information as JSON."""
    args, _extra = _build_parser().parse_known_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    config_dir = create_config_dir()
    settings = load_settings()
    devices = load_or_create_config(SUPPORTED_DEVICES_FILE)
    mappings = MappingStore().load()

    if args.command == "settings":
        output: object = settings.to_dict()
    elif args.command == "devices":
        output = [d.to_dict() for d in devices]
    elif args.command == "mappings":
        output = [m.to_dict() for m in mappings]
    elif args.command == "platform":
        output = get_platform()
    else:
        output = {
            "title": APP_TITLE,
            "platform": get_platform(),
            "config_dir": str(config_dir),
            "devices": len(devices),
            "mappings": len(mappings),
        }
    print(json.dumps(output, ensure_ascii=False))
    return 0