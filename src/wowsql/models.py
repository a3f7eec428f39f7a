"""Data models for WOWSQL requests and responses."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# Filter operators understood by the query endpoints
SIMPLE_OPERATORS = frozenset({"eq", "neq", "gt", "gte", "lt", "lte", "like"})
NULL_OPERATORS = frozenset({"is", "is_not"})
SET_OPERATORS = frozenset({"in", "not_in"})
RANGE_OPERATORS = frozenset({"between", "not_between"})
ADVANCED_OPERATORS = SET_OPERATORS | RANGE_OPERATORS
FILTER_OPERATORS = SIMPLE_OPERATORS | NULL_OPERATORS | ADVANCED_OPERATORS

LOGICAL_OPERATORS = frozenset({"AND", "OR"})


@dataclass
class Filter:
    """A single column/operator/value condition of a query."""

    column: str
    operator: str
    value: Any = None
    logical_op: str = "AND"

    def __post_init__(self):
        """Validate operator and value shape."""
        if not self.column:
            raise ValueError("Filter column cannot be empty")

        if self.operator not in FILTER_OPERATORS:
            raise ValueError(
                f"Unsupported filter operator '{self.operator}'. "
                f"Expected one of: {', '.join(sorted(FILTER_OPERATORS))}"
            )

        self.logical_op = self.logical_op.upper()
        if self.logical_op not in LOGICAL_OPERATORS:
            raise ValueError(
                f"logical_op must be 'AND' or 'OR'. Got: {self.logical_op}"
            )

        if self.operator in RANGE_OPERATORS:
            if not isinstance(self.value, (list, tuple)) or len(self.value) != 2:
                raise ValueError(
                    f"{self.operator} requires a [min, max] pair of values"
                )
            self.value = list(self.value)
        elif self.operator in SET_OPERATORS:
            if not isinstance(self.value, (list, tuple)):
                raise ValueError(f"{self.operator} requires a list of values")
            self.value = list(self.value)
        elif self.operator in NULL_OPERATORS and self.value is not None:
            raise ValueError(f"{self.operator} does not take a value")

    @property
    def is_advanced(self) -> bool:
        return self.operator in ADVANCED_OPERATORS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column": self.column,
            "operator": self.operator,
            "value": self.value,
            "logical_op": self.logical_op,
        }


@dataclass
class HavingClause:
    """Condition applied to grouped results (column may be an aggregate)."""

    column: str
    operator: str
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"column": self.column, "operator": self.operator, "value": self.value}


class StorageQuota(BaseModel):
    """Storage usage reported by the server.

    Unknown fields returned by the server are kept as extra attributes.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    storage_quota_gb: Optional[float] = Field(None, description="Total quota in GB")
    storage_used_gb: Optional[float] = Field(None, description="Used storage in GB")
    storage_available_gb: float = Field(
        0.0,
        validation_alias=AliasChoices("storage_available_gb", "available_gb"),
        description="Remaining storage in GB",
    )
    usage_percentage: Optional[float] = Field(
        None, description="Used share of the quota (0-100)"
    )


@dataclass
class AuthSession:
    """Token pair held by the auth client."""

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: int = 0

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "AuthSession":
        return cls(
            access_token=data.get("access_token") or "",
            refresh_token=data.get("refresh_token") or "",
            token_type=data.get("token_type") or "bearer",
            expires_in=data.get("expires_in") or 0,
        )


def _pick(data: Dict[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    value = data.get(snake)
    if value is None:
        value = data.get(camel)
    return default if value is None else value


@dataclass
class AuthUser:
    """User record normalized from snake_case or camelCase server payloads."""

    id: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    email_verified: bool = False
    user_metadata: Dict[str, Any] = field(default_factory=dict)
    app_metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None

    @classmethod
    def from_response(cls, user: Dict[str, Any]) -> "AuthUser":
        return cls(
            id=user.get("id"),
            email=user.get("email"),
            full_name=_pick(user, "full_name", "fullName"),
            avatar_url=_pick(user, "avatar_url", "avatarUrl"),
            email_verified=bool(_pick(user, "email_verified", "emailVerified", False)),
            user_metadata=_pick(user, "user_metadata", "userMetadata", {}),
            app_metadata=_pick(user, "app_metadata", "appMetadata", {}),
            created_at=_pick(user, "created_at", "createdAt"),
        )


@dataclass
class AuthResponse:
    """Result of a flow that signs the user in."""

    session: AuthSession
    user: Optional[AuthUser] = None


@dataclass
class AuthActionResult:
    """Result of a flow that only acknowledges a request (emails, resets)."""

    success: bool
    message: str
    user: Optional[AuthUser] = None


@dataclass
class OAuthAuthorization:
    """Where to send the user to start an OAuth flow."""

    authorization_url: str
    provider: str
    backend_callback_url: str = ""
    frontend_redirect_uri: str = ""

