"""Transfer layer: pack the snapshot tree and upload the archive."""

from cluster_backup.transfer.archiver import ArchiveError, archive_name, pack
from cluster_backup.transfer.uploader import UploadError, build_upload_url, put

__all__ = [
    "ArchiveError",
    "UploadError",
    "archive_name",
    "build_upload_url",
    "pack",
    "put",
]
