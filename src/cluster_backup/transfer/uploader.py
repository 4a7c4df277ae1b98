"""Upload an archive to object storage through a pre-authenticated URL."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import SplitResult, urlsplit, urlunsplit

import requests

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/zip"
SUCCESS_STATUSES = frozenset({200, 201})


class UploadError(Exception):
    """The archive could not be uploaded."""


def _split_url(url: str) -> SplitResult:
    try:
        return urlsplit(url)
    except ValueError as e:
        raise UploadError(f"invalid upload URL: {url!r}: {e}") from e


def build_upload_url(base_url: str, filename: str) -> str:
    """Append ``/filename`` to the URL path unless it already ends with it.

    A query string (signature parameters) is kept as-is after the path.
    """
    parts = _split_url(base_url)
    if parts.path.endswith("/" + filename):
        return base_url
    path = parts.path.rstrip("/") + "/" + filename
    return urlunsplit(parts._replace(path=path))


def _validate_url(url: str) -> None:
    parts = _split_url(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise UploadError(f"invalid upload URL: {url!r}")


def put(file_path: Path, destination_url: str, timeout: float | None = None) -> int:
    """PUT the whole file in a single request; return the HTTP status.

    No retries: any failure raises UploadError.
    """
    _validate_url(destination_url)
    path = Path(file_path)
    if not path.is_file():
        raise UploadError(f"file {path} does not exist")
    try:
        payload = path.read_bytes()
    except OSError as e:
        raise UploadError(f"failed to read {path}: {e}") from e

    logger.debug("Uploading %s (%d bytes)", path, len(payload))
    try:
        response = requests.put(
            destination_url,
            data=payload,
            headers={"Content-Type": CONTENT_TYPE},
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise UploadError(f"failed to send {path.name}: {e}") from e

    if response.status_code not in SUCCESS_STATUSES:
        raise UploadError(f"upload failed, status: {response.status_code} {response.reason}")
    logger.info("Uploaded %s (status %d)", path.name, response.status_code)
    return response.status_code
