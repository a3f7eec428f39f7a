"""Constants and helpers shared by the WOWSQL SDK tests."""

import json
from typing import Any

import httpx

PROJECT_SLUG = "myproject"
SERVICE_KEY = "wowsql_service_test_key"
ANON_KEY = "wowsql_anon_test_key"

DATABASE_URL = f"https://{PROJECT_SLUG}.wowsql.com/api/v2"
AUTH_URL = f"https://{PROJECT_SLUG}.wowsql.com/api/auth"
STORAGE_URL = "https://api.wowsql.com"
STORAGE_PROJECT_URL = f"{STORAGE_URL}/api/v1/storage/s3/projects/{PROJECT_SLUG}"


def request_json(request: httpx.Request) -> Any:
    """Decode the JSON body of a captured request."""
    return json.loads(request.content)
