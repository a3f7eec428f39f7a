"""URL normalization for WOWSQL project endpoints."""

from typing import Optional
from urllib.parse import urlparse

PLATFORM_DOMAIN = "wowsql.com"
DEFAULT_STORAGE_URL = f"https://api.{PLATFORM_DOMAIN}"

DATABASE_API_PATH = "/api/v2"
AUTH_API_PATH = "/api/auth"


def normalize_project_url(project_url: Optional[str]) -> str:
    """Turn a project slug or URL into the project's root URL.

    Accepts a full ``http(s)://`` URL, a host that already contains the
    platform domain, or a bare project slug. A trailing ``/api`` segment is
    removed so the caller can append the API path it needs.

    Args:
        project_url: Project slug (``myproject``) or URL

    Returns:
        str: Root URL without trailing slash or ``/api`` suffix

    Raises:
        ValueError: If the value is empty
    """
    if not project_url or not project_url.strip():
        raise ValueError("project_url cannot be empty")

    normalized = project_url.strip().rstrip("/")
    if normalized.endswith("/api"):
        normalized = normalized[: -len("/api")].rstrip("/")
    if not normalized:
        raise ValueError(f"project_url is not a valid project URL: {project_url}")

    if not normalized.startswith(("http://", "https://")):
        if PLATFORM_DOMAIN in normalized:
            normalized = f"https://{normalized}"
        else:
            normalized = f"https://{normalized}.{PLATFORM_DOMAIN}"
    return normalized


def build_database_url(project_url: str) -> str:
    """Base URL for table operations."""
    return normalize_project_url(project_url) + DATABASE_API_PATH


def build_auth_url(project_url: str) -> str:
    """Base URL for project authentication operations."""
    return normalize_project_url(project_url) + AUTH_API_PATH


def build_storage_url(base_url: Optional[str] = None) -> str:
    """Base URL for the storage API, which is shared by all projects."""
    if not base_url or not base_url.strip():
        return DEFAULT_STORAGE_URL
    return base_url.strip().rstrip("/")


def project_slug_from_url(project_url: str) -> str:
    """Extract the project slug (first host label) from a project slug or URL."""
    host = urlparse(normalize_project_url(project_url)).hostname or ""
    return host.split(".")[0]
