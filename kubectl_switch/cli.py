"""
Command-line entry points.

``kubectl-switch`` stands in for kubectl: it works out which kubectl the
target cluster wants, downloads it on first use and runs it with every
argument untouched, exiting with kubectl's own status.

``kubectl-switch-update`` offers to replace kubectl-switch with its
latest release.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence

from kubectl_switch._core.lifecycle import Kubectl
from kubectl_switch._core.resolve import HTTPVersionSource, VersionSource, resolve_version
from kubectl_switch.config import SwitchConfig
from kubectl_switch.errors import KubectlSwitchError
from kubectl_switch.update import SelfUpdater, current_executable

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("", "1", "t", "true", "y", "yes")


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Send kubectl-switch's own log records to stderr.
    
    kubectl owns stdout, so nothing here may write there.
    
    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        
    Returns:
        The configured package logger
    """
    effective_level = getattr(logging, level.upper(), None)
    if not isinstance(effective_level, int):
        effective_level = logging.INFO
    
    package_logger = logging.getLogger("kubectl_switch")
    package_logger.setLevel(effective_level)
    package_logger.handlers.clear()
    
    handler = logging.StreamHandler(sys.stderr)
    if effective_level <= logging.DEBUG:
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    return package_logger


class _PeekParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise ValueError(message)


def _peek_parser() -> argparse.ArgumentParser:
    parser = _PeekParser(add_help=False, allow_abbrev=False)
    parser.add_argument("-s", "--server")
    parser.add_argument("--token")
    return parser


def version_source_from_args(
    args: Sequence[str],
    env: Optional[dict] = None,
) -> Optional[VersionSource]:
    """
    Build a version source from kubectl's connection flags.
    
    The flags are only peeked at; they are still forwarded to kubectl.
    KUBECTL_SWITCH_SERVER / KUBECTL_SWITCH_TOKEN are used when the flags
    are absent.
    
    Returns:
        An HTTPVersionSource, or None when no API server is known
    """
    env = os.environ if env is None else env
    
    # Bool flag: bare means true, a value only in the --flag=value form.
    # The last occurrence wins.
    insecure = False
    remaining = []
    for arg in args:
        if arg == "--insecure-skip-tls-verify":
            insecure = True
        elif arg.startswith("--insecure-skip-tls-verify="):
            insecure = arg.split("=", 1)[1].lower() in _TRUE_VALUES
        else:
            remaining.append(arg)
    
    try:
        options, _ = _peek_parser().parse_known_args(remaining)
    except ValueError as e:
        logger.debug(f"Could not read connection flags: {e}")
        return None
    
    server = options.server or env.get("KUBECTL_SWITCH_SERVER")
    if not server:
        return None
    token = options.token or env.get("KUBECTL_SWITCH_TOKEN")
    return HTTPVersionSource(server, token=token, verify=not insecure)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the kubectl matching the target cluster.
    
    Returns:
        The status to exit with
    """
    args = sys.argv[1:] if argv is None else argv
    setup_logging(os.environ.get("KUBECTL_SWITCH_LOG_LEVEL", "INFO"))
    
    try:
        config = SwitchConfig.from_env()
        kubectl = Kubectl(config)
    except (KubectlSwitchError, ValueError) as e:
        print(f"kubectl-switch: {e}", file=sys.stderr)
        return 1
    
    version = resolve_version(
        version_source_from_args(args),
        config.default_version,
        config.version_timeout,
    )
    
    if not kubectl.installed(version):
        try:
            kubectl.download(version)
        except KubectlSwitchError as e:
            print(f"Failed to download kubectl version {version}: {e}", file=sys.stderr)
            return 1
    
    return kubectl.exec(version, args)


def self_update_main() -> int:
    """Offer to update kubectl-switch; always succeeds."""
    setup_logging(os.environ.get("KUBECTL_SWITCH_LOG_LEVEL", "INFO"))
    
    try:
        updater = SelfUpdater.from_config(SwitchConfig.from_env())
    except (KubectlSwitchError, ValueError) as e:
        logger.debug(f"Self-update unavailable: {e}")
        return 0
    
    decision = updater.confirm_and_update(current_executable())
    logger.debug(f"Self-update finished: {decision.value}")
    return 0


def run() -> None:
    sys.exit(main())


def run_self_update() -> None:
    sys.exit(self_update_main())
