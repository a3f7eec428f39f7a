"""Storage API Client for WOWSQL projects.

Manages the project's S3 bucket through the WOWSQL storage API. Uploads are
checked against the project's storage quota on the client before any bytes
are sent.
"""

import logging
import os
from pathlib import Path
from typing import IO, Any, Dict, List, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..config import DEFAULT_STORAGE_TIMEOUT, WOWSQLConfig
from ..exceptions import (
    PermissionDeniedError,
    StorageError,
    StorageLimitExceededError,
    WOWSQLError,
)
from ..models import StorageQuota
from ..urls import build_storage_url
from .base_client import WOWSQLBaseClient

logger = logging.getLogger(__name__)

BYTES_PER_GB = 1024.0 * 1024.0 * 1024.0
ANONYMOUS_KEY_PREFIX = "wowsql_anon_"

FileData = Union[bytes, bytearray, IO[bytes]]


def _measure(file_data: FileData) -> int:
    """Bytes left to upload from the current position; the position is kept."""
    if isinstance(file_data, (bytes, bytearray)):
        return len(file_data)
    position = file_data.tell()
    end = file_data.seek(0, os.SEEK_END)
    file_data.seek(position)
    return end - position


def _read(file_data: FileData) -> bytes:
    """Read the upload from the current position, then restore it."""
    if isinstance(file_data, (bytes, bytearray)):
        return bytes(file_data)
    position = file_data.tell()
    content = file_data.read()
    file_data.seek(position)
    return content


class WOWSQLStorage(WOWSQLBaseClient):
    """Client for project storage with automatic quota validation."""

    def __init__(
        self,
        project_slug: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_STORAGE_TIMEOUT,
        auto_check_quota: bool = True,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize storage client.

        Args:
            project_slug: Project slug (e.g. ``myproject``)
            api_key: API key for authentication
            base_url: Storage API base URL (default: https://api.wowsql.com)
            timeout: Request timeout in seconds, longer for uploads
            auto_check_quota: Check quota before uploads unless overridden
            http_client: Pre-configured httpx client
        """
        if not project_slug:
            raise ValueError("project_slug cannot be empty")

        super().__init__(
            base_url=build_storage_url(base_url),
            api_key=api_key,
            timeout=timeout,
            json_content_type=False,
            http_client=http_client,
        )
        self.project_slug = project_slug
        self.auto_check_quota = auto_check_quota
        self._quota_cache: Optional[StorageQuota] = None

    @classmethod
    def from_config(cls, config: WOWSQLConfig) -> "WOWSQLStorage":
        return cls(
            config.project_slug or "",
            config.api_key,
            base_url=config.storage_base_url,
            timeout=config.storage_timeout,
            auto_check_quota=config.auto_check_quota,
        )

    @property
    def project_path(self) -> str:
        return f"/api/v1/storage/s3/projects/{self.project_slug}"

    def _build_error(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> WOWSQLError:
        if status_code == 413:
            return StorageLimitExceededError(message, payload)
        return StorageError(message, status_code, payload)

    def invalidate_quota_cache(self) -> None:
        """Drop the cached quota so the next read fetches it again."""
        if self._quota_cache is not None:
            logger.debug("Invalidating storage quota cache")
        self._quota_cache = None

    def get_quota(self, force_refresh: bool = False) -> StorageQuota:
        """Get storage quota information.

        Args:
            force_refresh: Fetch from the server even when cached

        Raises:
            StorageError: If the quota fetch fails or returns an invalid quota
        """
        if self._quota_cache is not None and not force_refresh:
            return self._quota_cache

        response = self._request("GET", f"{self.project_path}/quota")
        try:
            self._quota_cache = StorageQuota.model_validate(response)
        except ValidationError as e:
            raise StorageError(
                f"Invalid quota response: {e}",
                response=response if isinstance(response, dict) else {},
            ) from e
        return self._quota_cache

    def check_quota(self, file_size: int) -> StorageQuota:
        """Fail if a file of ``file_size`` bytes does not fit the fresh quota.

        Raises:
            StorageLimitExceededError: If the file is larger than the space left
        """
        quota = self.get_quota(force_refresh=True)
        file_size_gb = file_size / BYTES_PER_GB
        if file_size_gb > quota.storage_available_gb:
            logger.warning(
                f"Upload of {file_size} bytes rejected: "
                f"{quota.storage_available_gb} GB available"
            )
            raise StorageLimitExceededError(
                f"Storage limit exceeded! File size: {file_size_gb:,.4f} GB, "
                f"Available: {quota.storage_available_gb:,.4f} GB.",
                quota.model_dump(),
            )
        return quota

    def upload_file(
        self,
        file_data: FileData,
        file_key: str,
        folder: Optional[str] = None,
        content_type: Optional[str] = None,
        check_quota: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Upload file contents to the bucket.

        Args:
            file_data: File bytes or a binary file object
            file_key: File name or path in the bucket
            folder: Optional folder path
            content_type: Optional content type
            check_quota: Override the client's automatic quota checking

        Returns:
            Upload result

        Raises:
            StorageLimitExceededError: If the upload would exceed the quota
            StorageError: If the upload fails
        """
        if not file_key:
            raise StorageError("file_key cannot be empty")

        should_check = (
            check_quota if check_quota is not None else self.auto_check_quota
        )
        if should_check:
            self.check_quota(_measure(file_data))

        form: Dict[str, str] = {"key": file_key}
        if content_type is not None:
            form["content_type"] = content_type

        params = {"folder": folder} if folder else None
        result: Dict[str, Any] = self._request(
            "POST",
            f"{self.project_path}/upload",
            params=params,
            files={"file": (file_key, _read(file_data))},
            data=form,
        )
        logger.info(f"Uploaded {file_key} to project {self.project_slug}")
        self.invalidate_quota_cache()
        return result

    def upload_from_path(
        self,
        file_path: Union[str, Path],
        file_key: Optional[str] = None,
        folder: Optional[str] = None,
        content_type: Optional[str] = None,
        check_quota: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Upload a file from the local filesystem.

        The file name is used as key when ``file_key`` is not given.

        Raises:
            StorageError: If the file does not exist or the upload fails
            StorageLimitExceededError: If the upload would exceed the quota
        """
        path = Path(file_path)
        if not path.is_file():
            raise StorageError(f"File not found: {file_path}")

        with open(path, "rb") as f:
            return self.upload_file(
                f, file_key or path.name, folder, content_type, check_quota
            )

    def list_files(
        self, prefix: Optional[str] = None, max_keys: int = 1000
    ) -> List[Dict[str, Any]]:
        """List files in the bucket, optionally under a prefix/folder."""
        params: Dict[str, Any] = {"max_keys": max_keys}
        if prefix:
            params["prefix"] = prefix

        response = self._request("GET", f"{self.project_path}/files", params=params)
        files: List[Dict[str, Any]] = response.get("files") or []
        return files

    def delete_file(self, file_key: str) -> Dict[str, Any]:
        """Delete a file from the bucket."""
        result: Dict[str, Any] = self._request(
            "DELETE", f"{self.project_path}/files/{quote(file_key, safe='/')}"
        )
        self.invalidate_quota_cache()
        return result

    def get_file_url(self, file_key: str, expires_in: int = 3600) -> Dict[str, Any]:
        """Get a presigned URL for a file together with its metadata."""
        metadata: Dict[str, Any] = self._request(
            "GET",
            f"{self.project_path}/files/{quote(file_key, safe='/')}/url",
            params={"expires_in": expires_in},
        )
        return metadata

    def get_presigned_url(
        self, file_key: str, expires_in: int = 3600, operation: str = "get_object"
    ) -> str:
        """Generate a presigned URL.

        Args:
            file_key: Path to the file in the bucket
            expires_in: URL validity in seconds
            operation: ``get_object`` (download) or ``put_object`` (upload)

        Returns:
            The URL, or an empty string if the server returned none
        """
        payload = {
            "file_key": file_key,
            "expires_in": expires_in,
            "operation": operation,
        }
        response = self._request(
            "POST", f"{self.project_path}/presigned-url", json_body=payload
        )
        return str(response.get("url") or "")

    def get_storage_info(self) -> Dict[str, Any]:
        info: Dict[str, Any] = self._request("GET", f"{self.project_path}/info")
        return info

    def provision_storage(self, region: str = "us-east-1") -> Dict[str, Any]:
        """Provision S3 storage for the project.

        The returned credentials are only shown once.

        Raises:
            PermissionDeniedError: If the client uses an anonymous key
            StorageError: If provisioning fails
        """
        if self.api_key.startswith(ANONYMOUS_KEY_PREFIX):
            raise PermissionDeniedError(
                "Provisioning storage requires a service role key"
            )

        result: Dict[str, Any] = self._request(
            "POST", f"{self.project_path}/provision", json_body={"region": region}
        )
        return result

    def get_available_regions(self) -> List[Dict[str, Any]]:
        """Get the available storage regions with pricing.

        The endpoint answers with a list, a ``{"regions": [...]}`` mapping,
        or a single region object; all three come back as a list.
        """
        response = self._request("GET", "/api/v1/storage/s3/regions")

        if isinstance(response, list):
            return response
        if isinstance(response, dict) and "regions" in response:
            return list(response["regions"] or [])
        return [response]
