"""CLI entrypoint for the cluster backup."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from cluster_backup import __version__
from cluster_backup.backup import print_result, run_backup
from cluster_backup.config import get_settings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Snapshot Kubernetes objects to YAML, zip them and upload the archive.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--namespaces",
        "-n",
        default=None,
        help="'*' for all namespaces or a comma-separated list (default: from env or '*')",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=None,
        help="Root directory of the snapshot tree (default: from env or 'resources')",
    )
    parser.add_argument(
        "--upload-url",
        default=None,
        help="Pre-authenticated object storage URL (default: from env)",
    )
    parser.add_argument(
        "--skip-upload",
        action="store_true",
        help="Build the archive but do not upload it",
    )
    parser.add_argument(
        "--kubeconfig",
        type=Path,
        default=None,
        help="Path to kubeconfig (default: in-cluster config, then KUBECONFIG or ~/.kube/config)",
    )
    parser.add_argument(
        "--context",
        default=None,
        help="Kubernetes context to use",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for cluster-backup CLI."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )

    try:
        settings = get_settings()
        if args.namespaces is not None:
            settings.namespaces = args.namespaces
        if args.output_dir:
            settings.output_dir = args.output_dir
        if args.upload_url:
            settings.upload_url = args.upload_url
        if args.skip_upload:
            settings.skip_upload = True
        if args.kubeconfig:
            settings.kubeconfig = args.kubeconfig
        if args.context:
            settings.context = args.context

        result = run_backup(settings=settings)
    except Exception as e:
        logging.exception("Backup failed")
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print_result(result, Console())
    return 0 if result.transfer_ok else 1


if __name__ == "__main__":
    sys.exit(main())
