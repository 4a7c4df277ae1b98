"""Orchestrator: resolve namespaces -> walk -> archive -> upload -> report."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Iterable

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from cluster_backup.backup.report import (
    REPORT_HEADER,
    REPORT_SECTION_ARCHIVE,
    REPORT_SECTION_CAPTURE,
    REPORT_SECTION_FAILURES,
    REPORT_SECTION_UPLOAD,
    REPORT_UPLOAD_SKIPPED,
)
from cluster_backup.cluster import ClusterClient, KubeClusterClient
from cluster_backup.config import Settings, get_settings, parse_namespace_selector
from cluster_backup.snapshot import DEFAULT_CATALOG, ClusterWalker, ResourceDescriptor, WalkReport
from cluster_backup.snapshot.writer import MODIFIED, ORIGINAL
from cluster_backup.transfer import UploadError, archive_name, build_upload_url, pack, put

logger = logging.getLogger(__name__)

# Failed steps listed in the printed report before truncating.
MAX_REPORTED_FAILURES = 20


@dataclass
class BackupResult:
    """Result of a full backup run."""

    walk: WalkReport
    archive_path: Path | None = None
    archive_error: str = ""
    upload_url: str | None = None
    uploaded: bool = False
    upload_skipped_reason: str = ""
    upload_error: str = ""

    @property
    def capture_completed(self) -> bool:
        return self.walk.finished_at is not None

    @property
    def transfer_ok(self) -> bool:
        """Archive built and upload either done or deliberately skipped."""
        if self.archive_path is None:
            return False
        return self.uploaded or (bool(self.upload_skipped_reason) and not self.upload_error)


def resolve_namespaces(selector: str, client: ClusterClient) -> list[str]:
    """Expand the wildcard against the cluster, or return the explicit list."""
    explicit = parse_namespace_selector(selector)
    if explicit is not None:
        return explicit
    logger.info("Capturing all namespaces")
    return client.list_namespaces()


def _upload(archive: Path, opts: Settings, result: BackupResult) -> None:
    if opts.skip_upload:
        result.upload_skipped_reason = "disabled by configuration"
        return
    if not opts.upload_url:
        logger.warning("No upload URL configured; archive kept at %s", archive)
        result.upload_skipped_reason = "no upload URL configured"
        return
    try:
        url = build_upload_url(opts.upload_url, archive.name)
        result.upload_url = url
        put(archive, url, timeout=opts.upload_timeout)
    except UploadError as e:
        logger.error("Upload to object storage failed: %s", e)
        result.upload_error = str(e)
        return
    result.uploaded = True


def run_backup(
    settings: Settings | None = None,
    client: ClusterClient | None = None,
    catalog: Iterable[ResourceDescriptor] = DEFAULT_CATALOG,
    today: date | None = None,
) -> BackupResult:
    """
    Run the full backup: capture every namespace, zip the tree, upload the zip.

    Client construction and output root creation errors propagate. Archive and
    upload failures are logged and recorded; the on-disk snapshot stays valid.
    """
    opts = settings or get_settings()
    if client is None:
        client = KubeClusterClient(
            kubeconfig=str(opts.kubeconfig) if opts.kubeconfig else None,
            context=opts.context,
        )

    namespaces = resolve_namespaces(opts.namespaces, client)
    if not namespaces:
        logger.warning("Namespace selector %r matched no namespaces", opts.namespaces)

    root = Path(opts.output_dir)
    root.mkdir(parents=True, exist_ok=True)

    # Capture
    walk = ClusterWalker(client).run(namespaces, catalog, root)
    result = BackupResult(walk=walk)
    logger.info("Capture completed")

    # Archive
    archive = Path(opts.archive_dir) / archive_name(today)
    try:
        Path(opts.archive_dir).mkdir(parents=True, exist_ok=True)
        result.archive_path = pack(root, archive)
    except OSError as e:
        logger.error("Failed to archive %s: %s", root, e)
        result.archive_error = str(e)
        result.upload_skipped_reason = "no archive"
        return result

    # Upload
    _upload(result.archive_path, opts, result)
    return result


def build_report(result: BackupResult) -> str:
    """Render a BackupResult as Markdown."""
    walk = result.walk
    parts = [REPORT_HEADER]
    parts.append(
        REPORT_SECTION_CAPTURE.format(
            namespaces=", ".join(walk.namespaces) or "none",
            original=walk.files_written.get(ORIGINAL, 0),
            modified=walk.files_written.get(MODIFIED, 0),
            failure_count=len(walk.failures),
        )
    )
    if walk.failures:
        shown = walk.failures[:MAX_REPORTED_FAILURES]
        lines = [f"- **{s.scope}**: {s.message}" for s in shown]
        if len(walk.failures) > len(shown):
            lines.append(f"- ... and {len(walk.failures) - len(shown)} more")
        parts.append(REPORT_SECTION_FAILURES.format(failures="\n".join(lines)))

    if result.archive_path is not None:
        archive = f"Created `{result.archive_path}`."
    else:
        archive = f"Failed: {result.archive_error}"
    parts.append(REPORT_SECTION_ARCHIVE.format(archive=archive))

    if result.uploaded:
        upload = f"Uploaded `{result.archive_path.name}`."
    elif result.upload_error:
        upload = f"Failed: {result.upload_error}"
    else:
        upload = REPORT_UPLOAD_SKIPPED.format(reason=result.upload_skipped_reason)
    parts.append(REPORT_SECTION_UPLOAD.format(upload=upload))
    return "\n".join(parts)


def print_result(result: BackupResult, console: Console | None = None) -> None:
    """Print backup result to console using Rich."""
    c = console or Console()
    style = "green" if result.transfer_ok and not result.walk.failures else "yellow"
    c.print(Panel(Markdown(build_report(result)), title="Cluster Backup", border_style=style))
