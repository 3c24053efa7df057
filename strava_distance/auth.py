import logging
import secrets
from typing import Callable
from urllib.parse import parse_qs, urlencode, urlparse

import requests

from .enums import AuthState
from .exceptions import (
    AuthFlowError,
    AuthorizationDenied,
    MalformedResponse,
    MissingCode,
    StateMismatch,
    StravaDistanceError,
    TokenExchangeFailed,
)
from .limiter import request_with_retries
from .models import TokenResponse

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"
TOKEN_URL = "https://www.strava.com/oauth/token"
REDIRECT_URI = "http://localhost/exchange_token"
SCOPE = "read,activity:read_all"


def generate_state() -> str:
    """Fresh random value for the OAuth ``state`` parameter."""
    return secrets.token_urlsafe(32)


def build_authorization_url(client_id: str, state: str) -> str:
    """Return the Strava consent URL for ``client_id``.

    Only ``client_id`` and ``state`` vary; everything else is fixed. The
    query is percent-encoded, so the comma and colon in the scope become
    ``%2C`` and ``%3A``.
    """
    params = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": REDIRECT_URI,
        "approval_prompt": "force",
        "scope": SCOPE,
        "state": state,
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


def extract_authorization_code(redirect_url: str, expected_state: str) -> str:
    """Validate the redirect URL Strava sent the browser to and return the code.

    Checks run in a fixed order: ``state`` first (a mismatch aborts even when
    a code is present), then ``error`` (the user declined), then ``code``.
    A redirect without any ``state`` is treated as a mismatch.
    """
    query = parse_qs(urlparse(redirect_url.strip()).query, keep_blank_values=True)

    received = query.get("state", [None])[0]
    if received is None or not secrets.compare_digest(received.encode(), expected_state.encode()):
        raise StateMismatch(expected_state, received or "")

    error = query.get("error", [None])[0]
    if error is not None:
        raise AuthorizationDenied(error)

    code = query.get("code", [""])[0]
    if not code:
        raise MissingCode()
    return code


def exchange_code_for_token(
    client_id: str,
    client_secret: str,
    code: str,
    session: requests.Session | None = None,
    timeout: float = 30.0,
    max_retries: int = 0,
) -> TokenResponse:
    """POST the authorization code to the token endpoint, exactly once.

    Raises ``TokenExchangeFailed`` with the raw response body on any
    non-success status and ``MalformedResponse`` if the body does not
    deserialize into a ``TokenResponse``.
    """
    owns_session = session is None
    session = session or requests.Session()
    request = request_with_retries(session.request, max_retries=max_retries)
    try:
        resp = request(
            "POST",
            TOKEN_URL,
            data={
                "client_id": client_id,
                "client_secret": client_secret,
                "code": code,
                "grant_type": "authorization_code",
            },
            timeout=timeout,
        )
    finally:
        if owns_session:
            session.close()
    if not 200 <= resp.status_code < 300:
        logger.debug("Token endpoint returned %s", resp.status_code)
        raise TokenExchangeFailed("Token exchange failed", status_code=resp.status_code, details=resp.text)
    try:
        data = resp.json()
    except ValueError:
        raise MalformedResponse("Token endpoint returned invalid JSON", details=resp.text) from None
    return TokenResponse.from_dict(data)


class StravaAuth:
    """Drives one OAuth authorization-code flow from URL to tokens.

    The instance owns a single ``state`` token and walks the ``AuthState``
    machine once: ``START -> URL_BUILT -> AWAITING_REDIRECT -> CODE_EXTRACTED
    -> TOKEN_EXCHANGED``. Any failure moves it to ``ABORTED`` and the error
    is re-raised unchanged; there are no retries.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        session: requests.Session | None = None,
        timeout: float = 30.0,
        max_retries: int = 0,
        state: str | None = None,
    ) -> None:
        """Initialize the flow.

        Parameters
        ----------
        client_id: str
            Strava client id.
        client_secret: str
            Strava client secret.
        session: requests.Session | None
            HTTP session for the token exchange (a short-lived one if omitted).
        timeout: float
            Token request timeout in seconds.
        max_retries: int
            Retries on network-layer failures only.
        state: str | None
            CSRF token; generated if omitted.
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.session = session
        self.timeout = timeout
        self.max_retries = max_retries
        self.state_token = state or generate_state()
        self.status = AuthState.START
        self.token: TokenResponse | None = None
        self._code: str | None = None

    def _require(self, *allowed: AuthState) -> None:
        if self.status.is_terminal:
            raise AuthFlowError(f"Authorization flow already finished ({self.status.name})")
        if self.status not in allowed:
            expected = " or ".join(s.name for s in allowed)
            raise AuthFlowError(f"Authorization flow is {self.status.name}, expected {expected}")

    def _abort(self) -> None:
        self.status = AuthState.ABORTED
        self._code = None
        logger.debug("Authorization flow aborted")

    def authorization_url(self) -> str:
        self._require(AuthState.START, AuthState.URL_BUILT)
        url = build_authorization_url(self.client_id, self.state_token)
        self.status = AuthState.URL_BUILT
        logger.info("Built authorization URL for client_id=%s", self.client_id)
        return url

    def handle_redirect(self, redirect_url: str) -> str:
        """Validate the pasted redirect URL and keep the code for the exchange."""
        self._require(AuthState.URL_BUILT, AuthState.AWAITING_REDIRECT)
        try:
            code = extract_authorization_code(redirect_url, self.state_token)
        except StravaDistanceError:
            self._abort()
            raise
        self._code = code
        self.status = AuthState.CODE_EXTRACTED
        logger.info("Authorization code received")
        return code

    def exchange_code(self) -> TokenResponse:
        self._require(AuthState.CODE_EXTRACTED)
        code, self._code = self._code, None
        try:
            token = exchange_code_for_token(
                self.client_id,
                self.client_secret,
                code,
                session=self.session,
                timeout=self.timeout,
                max_retries=self.max_retries,
            )
        except StravaDistanceError:
            self._abort()
            raise
        self.token = token
        self.status = AuthState.TOKEN_EXCHANGED
        logger.info(
            "Exchanged code for access token for athlete %s, expires_at=%s",
            token.athlete.id, token.expires_at,
        )
        return token

    def run(self, read_redirect: Callable[[str], str]) -> TokenResponse:
        """Run the whole flow.

        ``read_redirect`` receives the authorization URL, shows it to the user
        and returns the redirect URL they paste back.
        """
        url = self.authorization_url()
        self.status = AuthState.AWAITING_REDIRECT
        try:
            redirect_url = read_redirect(url)
        except (EOFError, KeyboardInterrupt):
            self._abort()
            raise
        self.handle_redirect(redirect_url)
        return self.exchange_code()
