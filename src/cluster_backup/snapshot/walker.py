"""Walk namespaces x resource kinds and write both snapshot variants."""

from __future__ import annotations

import copy
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Sequence

from cluster_backup.cluster.client import ClusterAPIError, ClusterClient
from cluster_backup.snapshot.catalog import (
    NAMESPACE_DESCRIPTOR,
    ResourceDescriptor,
    cluster_kinds,
    namespaced_kinds,
)
from cluster_backup.snapshot.models import WalkReport
from cluster_backup.snapshot.sanitizer import clean
from cluster_backup.snapshot.writer import (
    CLUSTER_SCOPE_DIR,
    MODIFIED,
    ORIGINAL,
    VARIANTS,
    SnapshotWriteError,
    SnapshotWriter,
    ensure_dir,
    namespace_path,
    object_path,
)

logger = logging.getLogger(__name__)


def _object_name(obj: dict[str, Any]) -> str | None:
    metadata = obj.get("metadata")
    if isinstance(metadata, dict):
        name = metadata.get("name")
        if isinstance(name, str) and name:
            return name
    return None


class ClusterWalker:
    """Captures every catalog kind in every namespace into ``original``/``modified``.

    Read-only against the cluster. No single namespace, kind or object failure
    stops the walk; each one is logged and recorded in the returned report.
    """

    def __init__(self, client: ClusterClient, writer: SnapshotWriter | None = None) -> None:
        self.client = client
        self.writer = writer or SnapshotWriter()

    def run(
        self,
        namespaces: Sequence[str],
        catalog: Iterable[ResourceDescriptor],
        output_root: Path,
    ) -> WalkReport:
        """Walk namespaces in input order and kinds in catalog order."""
        root = Path(output_root)
        catalog = list(catalog)
        report = WalkReport()

        for namespace in namespaces:
            logger.info("Processing namespace: %s", namespace)
            report.namespaces.append(namespace)
            self._walk_namespace(namespace, namespaced_kinds(catalog), root, report)

        scoped = cluster_kinds(catalog)
        if scoped:
            logger.info("Processing cluster-scoped resources")
            # Kind directories (and _cluster with them) are created on first object.
            ready = {v: True for v in VARIANTS}
            for descriptor in scoped:
                self._walk_kind(descriptor, None, CLUSTER_SCOPE_DIR, ready, root, report)

        report.finished_at = datetime.now()
        logger.info(
            "Snapshot finished: %d files written, %d failures",
            report.total_files,
            len(report.failures),
        )
        return report

    def _mkdir(self, path: Path, report: WalkReport) -> bool:
        try:
            ensure_dir(path)
        except OSError as e:
            logger.warning("Failed to create directory %s: %s", path, e)
            report.record(f"mkdir {path}", False, str(e))
            return False
        return True

    def _walk_namespace(
        self,
        namespace: str,
        kinds: list[ResourceDescriptor],
        root: Path,
        report: WalkReport,
    ) -> None:
        ready = {v: self._mkdir(root / v / namespace, report) for v in VARIANTS}
        self._save_namespace(namespace, ready, root, report)
        for descriptor in kinds:
            self._walk_kind(descriptor, namespace, namespace, ready, root, report)

    def _save_namespace(
        self, namespace: str, ready: dict[str, bool], root: Path, report: WalkReport
    ) -> None:
        scope = f"get namespace {namespace}"
        try:
            obj = self.client.get_object(NAMESPACE_DESCRIPTOR, namespace)
        except ClusterAPIError as e:
            logger.warning("Failed to get Namespace %s: %s", namespace, e)
            report.record(scope, False, str(e))
            return
        report.record(scope, True)
        self._save_variants(
            obj,
            {v: namespace_path(root, v, namespace) for v in VARIANTS},
            ready,
            report,
        )

    def _walk_kind(
        self,
        descriptor: ResourceDescriptor,
        namespace: str | None,
        folder: str,
        ready: dict[str, bool],
        root: Path,
        report: WalkReport,
    ) -> None:
        where = f"namespace {namespace}" if namespace else "cluster scope"
        scope = f"list {descriptor.resource} in {where}"
        logger.info("Processing resource type: %s", descriptor.resource)
        try:
            items = self.client.list_objects(descriptor, namespace)
        except ClusterAPIError as e:
            logger.warning("Failed to list %s in %s: %s", descriptor.resource, where, e)
            report.record(scope, False, str(e))
            return
        report.record(scope, True, f"{len(items)} objects")
        if not items:
            logger.info("No %s found in %s", descriptor.resource, where)
            return

        kind_ready = {
            v: ready[v] and self._mkdir(root / v / folder / descriptor.resource, report)
            for v in VARIANTS
        }
        for item in items:
            name = _object_name(item)
            if name is None:
                logger.warning("Skipping %s without metadata.name in %s", descriptor.resource, where)
                report.record(f"save {descriptor.resource} in {where}", False, "missing metadata.name")
                continue
            logger.info("Saving %s/%s", descriptor.resource, name)
            self._save_variants(
                item,
                {v: object_path(root, v, folder, descriptor.resource, name) for v in VARIANTS},
                kind_ready,
                report,
            )

    def _save_variants(
        self,
        obj: dict[str, Any],
        paths: dict[str, Path],
        ready: dict[str, bool],
        report: WalkReport,
    ) -> None:
        """Write ``obj`` as-is, then a sanitized copy; each write fails on its own."""
        payloads = {ORIGINAL: obj, MODIFIED: clean(copy.deepcopy(obj))}
        for variant in VARIANTS:
            path = paths[variant]
            if not ready[variant]:
                report.record(f"write {path}", False, "directory unavailable")
                continue
            try:
                self.writer.write(payloads[variant], path)
            except SnapshotWriteError as e:
                logger.warning("Failed to save %s resource %s: %s", variant, path, e)
                report.record(f"write {path}", False, str(e))
                continue
            report.count_file(variant)
