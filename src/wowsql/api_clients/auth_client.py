"""Authentication API Client for WOWSQL projects.

Uses the same project API keys as database operations: the anonymous key for
client-side flows (signup, login, OAuth) and the service role key for
server-side use. Session tokens are kept in memory only.
"""

import logging
from typing import Any, Dict, Optional, Union

import httpx

from ..config import DEFAULT_TIMEOUT, WOWSQLConfig
from ..exceptions import AuthError, WOWSQLError
from ..models import (
    AuthActionResult,
    AuthResponse,
    AuthSession,
    AuthUser,
    OAuthAuthorization,
)
from ..urls import build_auth_url
from .base_client import WOWSQLBaseClient

logger = logging.getLogger(__name__)

OTP_PURPOSES = ("login", "signup", "password_reset")
MAGIC_LINK_PURPOSES = ("login", "signup", "email_verification")

PASSWORD_RESET_MESSAGE = (
    "Password reset successfully! You can now login with your new password"
)


class ProjectAuthClient(WOWSQLBaseClient):
    """API client for project user authentication flows."""

    def __init__(
        self,
        project_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize authentication client.

        Args:
            project_url: Project slug or full project URL
            api_key: Anonymous key (client side) or service role key (server side)
            timeout: Request timeout in seconds
            http_client: Pre-configured httpx client
        """
        super().__init__(
            base_url=build_auth_url(project_url),
            api_key=api_key,
            timeout=timeout,
            http_client=http_client,
        )
        self._session_tokens = AuthSession()

    @classmethod
    def from_config(cls, config: WOWSQLConfig) -> "ProjectAuthClient":
        return cls(config.project_url, config.api_key, timeout=config.timeout)

    def _build_error(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> WOWSQLError:
        return AuthError(message, status_code, payload)

    def _persist_session(self, data: Dict[str, Any]) -> AuthSession:
        self._session_tokens = AuthSession.from_response(data)
        return self._session_tokens

    def _auth_response(self, data: Dict[str, Any]) -> AuthResponse:
        session = self._persist_session(data)
        user = data.get("user")
        return AuthResponse(
            session=session,
            user=AuthUser.from_response(user) if user else None,
        )

    @staticmethod
    def _action_result(data: Dict[str, Any], default_message: str) -> AuthActionResult:
        user = data.get("user")
        return AuthActionResult(
            success=data.get("success", True),
            message=data.get("message") or default_message,
            user=AuthUser.from_response(user) if user else None,
        )

    def sign_up(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        user_metadata: Optional[Dict[str, Any]] = None,
    ) -> AuthResponse:
        """Sign up a new user and keep the returned session.

        Raises:
            AuthError: If signup fails
        """
        payload: Dict[str, Any] = {"email": email, "password": password}
        if full_name is not None:
            payload["full_name"] = full_name
        if user_metadata is not None:
            payload["user_metadata"] = user_metadata

        data = self._request("POST", "/signup", json_body=payload)
        logger.debug("Signup succeeded, session stored")
        return self._auth_response(data)

    def sign_in(self, email: str, password: str) -> AuthResponse:
        """Sign in an existing user and keep the returned session.

        Raises:
            AuthError: If the credentials are rejected or the request fails
        """
        data = self._request(
            "POST", "/login", json_body={"email": email, "password": password}
        )
        logger.debug("Login succeeded, session stored")
        return self._auth_response(data)

    def get_oauth_authorization_url(
        self, provider: str, redirect_uri: Optional[str] = None
    ) -> OAuthAuthorization:
        """Get the URL that starts an OAuth flow.

        Args:
            provider: OAuth provider name (e.g. ``github``, ``google``)
            redirect_uri: Frontend URI to return to after the flow

        Raises:
            AuthError: If provider is empty, not configured, or the request fails
        """
        if not provider or not provider.strip():
            raise AuthError("provider is required and cannot be empty")

        params = None
        if redirect_uri is not None:
            params = {"frontend_redirect_uri": redirect_uri.strip()}

        try:
            data = self._request("GET", f"/oauth/{provider}", params=params)
        except AuthError as e:
            if e.status_code == 502:
                raise AuthError(
                    "Bad Gateway (502): The backend server may be down or "
                    "unreachable. Check if the backend is running and accessible "
                    f"at {self.base_url}",
                    502,
                    e.response,
                ) from e
            if e.status_code == 400:
                raise AuthError(
                    f"Bad Request (400): {e.message}. Ensure OAuth provider "
                    f"'{provider}' is configured and enabled for this project.",
                    400,
                    e.response,
                ) from e
            raise

        return OAuthAuthorization(
            authorization_url=data.get("authorization_url") or "",
            provider=data.get("provider") or provider,
            backend_callback_url=data.get("backend_callback_url") or "",
            frontend_redirect_uri=data.get("frontend_redirect_uri")
            or (redirect_uri or ""),
        )

    def exchange_oauth_callback(
        self, provider: str, code: str, redirect_uri: Optional[str] = None
    ) -> AuthResponse:
        """Exchange an OAuth callback code for a session."""
        payload = {"code": code}
        if redirect_uri is not None:
            payload["redirect_uri"] = redirect_uri

        data = self._request("POST", f"/oauth/{provider}/callback", json_body=payload)
        return self._auth_response(data)

    def forgot_password(self, email: str) -> AuthActionResult:
        data = self._request("POST", "/forgot-password", json_body={"email": email})
        return self._action_result(
            data, "If that email exists, a password reset link has been sent"
        )

    def reset_password(self, token: str, new_password: str) -> AuthActionResult:
        data = self._request(
            "POST",
            "/reset-password",
            json_body={"token": token, "new_password": new_password},
        )
        return self._action_result(data, PASSWORD_RESET_MESSAGE)

    def send_otp(self, email: str, purpose: str = "login") -> AuthActionResult:
        """Send a one-time code to the user's email.

        Raises:
            AuthError: If purpose is not login, signup or password_reset
        """
        if purpose not in OTP_PURPOSES:
            raise AuthError("Purpose must be 'login', 'signup', or 'password_reset'")

        data = self._request(
            "POST", "/otp/send", json_body={"email": email, "purpose": purpose}
        )
        return self._action_result(
            data, "If that email exists, an OTP code has been sent"
        )

    def verify_otp(
        self,
        email: str,
        otp: str,
        purpose: str = "login",
        new_password: Optional[str] = None,
    ) -> Union[AuthActionResult, AuthResponse]:
        """Verify a one-time code.

        For ``password_reset`` the new password is required and an action
        result is returned; otherwise the user is signed in.

        Returns:
            AuthActionResult for password resets, AuthResponse otherwise

        Raises:
            AuthError: If arguments are invalid or verification fails
        """
        if purpose not in OTP_PURPOSES:
            raise AuthError("Purpose must be 'login', 'signup', or 'password_reset'")
        if purpose == "password_reset" and new_password is None:
            raise AuthError("new_password is required for password_reset purpose")

        payload = {"email": email, "otp": otp, "purpose": purpose}
        if new_password is not None:
            payload["new_password"] = new_password

        data = self._request("POST", "/otp/verify", json_body=payload)

        if purpose == "password_reset":
            return self._action_result(data, PASSWORD_RESET_MESSAGE)
        return self._auth_response(data)

    def send_magic_link(self, email: str, purpose: str = "login") -> AuthActionResult:
        """Send a magic sign-in link.

        Raises:
            AuthError: If purpose is not login, signup or email_verification
        """
        if purpose not in MAGIC_LINK_PURPOSES:
            raise AuthError(
                "Purpose must be 'login', 'signup', or 'email_verification'"
            )

        data = self._request(
            "POST", "/magic-link/send", json_body={"email": email, "purpose": purpose}
        )
        return self._action_result(
            data, "If that email exists, a magic link has been sent"
        )

    def verify_email(self, token: str) -> AuthActionResult:
        data = self._request("POST", "/verify-email", json_body={"token": token})
        return self._action_result(data, "Email verified successfully!")

    def resend_verification(self, email: str) -> AuthActionResult:
        data = self._request(
            "POST", "/resend-verification", json_body={"email": email}
        )
        return self._action_result(
            data, "If that email exists, a verification email has been sent"
        )

    def get_session(self) -> AuthSession:
        """Current session tokens (both ``None`` when signed out)."""
        return self._session_tokens

    def set_session(
        self, access_token: str, refresh_token: Optional[str] = None
    ) -> None:
        self._session_tokens = AuthSession(
            access_token=access_token, refresh_token=refresh_token
        )

    def clear_session(self) -> None:
        self._session_tokens = AuthSession()
