"""IP Office management API client.

This client talks to the WebManagement SDK listener of an Avaya IP Office
appliance (``https://{host}:7070/WebManagement/ws/sdk``). Sessions are cookie
based: ``GET security/authenticate`` with basic auth returns a JSESSIONID and
an SDK token cookie, ``DELETE`` on the same path closes the session.

Every session is scoped to a single logical operation through
``IpoApiClient.with_session``; sessions are never pooled or shared.
"""

import base64
import json
import logging
import re
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import parse_qsl, urlsplit

import httpx
from opentelemetry import trace

from integration.exceptions import (
    IpoAuthenticationException,
    IpoProtectedIdentityException,
    IpoRequestException,
)
from integration.models.ipo_session_dto import (
    IpoCredentials,
    IpoDeauthResult,
    IpoRawResponse,
    IpoSession,
)
from integration.services.ipo_request_logger import IpoRequestLogEntry, IpoRequestLogger

if TYPE_CHECKING:
    from neuroglia.hosting.web import WebApplicationBuilder

log = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")

MANAGEMENT_PORT = 7070
SDK_BASE_PATH = "/WebManagement/ws/sdk"
LEGACY_BASE_PATH = "/WebManagement/ws"  # Logout path on some firmware versions
AUTHENTICATE_PATH = "/security/authenticate"

PROTECTED_IDENTITY = "nouser"

SESSION_COOKIE_NAMES = frozenset({"jsessionid"})
SDK_TOKEN_COOKIE_NAMES = frozenset({"sdk-token", "x-sdk-token"})

SDK_HEADERS = {
    "X-User-Agent": "Avaya-SDKUser",
    "X-User-Client": "Avaya-WebAdmin",
}
AUTHENTICATE_ACCEPT = "application/json, */*"
# Content-type labeling on the appliance does not match the body shape reliably
REQUEST_ACCEPT = "application/json, application/xml, text/xml;q=0.9, */*;q=0.8"

# A comma starts a new cookie only when followed by "name=" (not "Expires=Wed, 21 Oct ...")
_JOINED_SET_COOKIE_SEPARATOR = re.compile(r",\s*(?=[^;,=\s]+=)")


def build_base_url(host: str) -> str:
    """Build the management API base address for a host.

    Accepts a bare hostname/IP or a full URL. Any scheme, port, path or query
    is discarded in favor of ``https`` on the management port.

    Args:
        host: Appliance hostname, IP address or URL

    Returns:
        Base URL such as ``https://10.0.0.10:7070/WebManagement/ws/sdk``
    """
    candidate = host.strip()
    if "://" not in candidate:
        candidate = f"https://{candidate}"
    hostname = urlsplit(candidate).hostname
    if not hostname:
        raise ValueError(f"Cannot derive an IP Office hostname from {host!r}")
    if ":" in hostname:
        hostname = f"[{hostname}]"
    return f"https://{hostname}:{MANAGEMENT_PORT}{SDK_BASE_PATH}"


def build_url(base_url: str, path: str) -> str:
    return f"{base_url}{path if path.startswith('/') else '/' + path}"


def basic_auth_header(username: str, password: str) -> str:
    raw = f"{username}:{password}".encode()
    return f"Basic {base64.b64encode(raw).decode('ascii')}"


def split_set_cookie_header(value: str) -> list[str]:
    """Split a Set-Cookie header that may carry several cookies joined by commas."""
    return [part.strip() for part in _JOINED_SET_COOKIE_SEPARATOR.split(value) if part.strip()]


def collect_set_cookie_values(headers: httpx.Headers) -> list[str]:
    """Collect every Set-Cookie value, whether exposed individually or pre-joined."""
    values: list[str] = []
    for header in headers.get_list("set-cookie"):
        values.extend(split_set_cookie_header(header))
    return values


def merge_session_cookies(set_cookie_values: Iterable[str]) -> str:
    """Reduce Set-Cookie values to a deterministic Cookie header.

    One ``name=value`` pair is kept per cookie name, compared
    case-insensitively (last value wins, first position kept). The
    session identifier comes first, the SDK token second, the remaining
    cookies follow in the order they were first seen.

    Args:
        set_cookie_values: Raw Set-Cookie values, attributes included

    Returns:
        Cookie header string joined by ``"; "``
    """
    pairs: dict[str, str] = {}
    for raw in set_cookie_values:
        pair = raw.split(";", 1)[0].strip()
        name, sep, _ = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        pairs[name.lower()] = pair

    session_name = next((n for n in pairs if n in SESSION_COOKIE_NAMES), None)
    token_name = next((n for n in pairs if n in SDK_TOKEN_COOKIE_NAMES), None)

    ordered = [pairs[n] for n in (session_name, token_name) if n is not None]
    ordered.extend(pair for n, pair in pairs.items() if n not in (session_name, token_name))
    return "; ".join(ordered)


def find_session_tokens(cookie_header: str) -> tuple[bool, bool]:
    """Report whether a cookie header holds a session identifier and an SDK token."""
    names = {part.split("=", 1)[0].strip().lower() for part in cookie_header.split(";") if "=" in part}
    return bool(names & SESSION_COOKIE_NAMES), bool(names & SDK_TOKEN_COOKIE_NAMES)


def is_protected_identity(path: str, target_name: str | None = None) -> bool:
    """Check whether a call targets the protected NoUser account."""
    names = [target_name] if target_name else []
    names.extend(value for key, value in parse_qsl(urlsplit(path).query) if key.lower() == "name")
    return any(name.strip().casefold() == PROTECTED_IDENTITY for name in names)


class IpoApiClient:
    """Client for the IP Office management API.

    Handles cookie-session authentication, authenticated resource calls and
    guaranteed logout. Credentials are supplied per call.
    """

    def __init__(
        self,
        timeout: httpx.Timeout | float = 30.0,
        request_logger: IpoRequestLogger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize IP Office API client.

        Args:
            timeout: Connect/read/write/pool timeouts applied to every call
            request_logger: Receives every resource exchange (best-effort)
            transport: Optional httpx transport override
        """
        self.timeout = timeout if isinstance(timeout, httpx.Timeout) else httpx.Timeout(timeout)
        self._request_logger = request_logger
        self._transport = transport

    def _create_client(self, credentials: IpoCredentials) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            verify=not credentials.allow_insecure_tls,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def authenticate(self, credentials: IpoCredentials) -> IpoSession:
        """Open a session on the appliance.

        Args:
            credentials: Appliance host and account

        Returns:
            IpoSession holding the merged session cookies

        Raises:
            IpoAuthenticationException: On an unusable host, transport failure,
                non-2xx status or when the session cookies are missing despite
                HTTP success
        """
        try:
            auth_url = build_url(build_base_url(credentials.host), AUTHENTICATE_PATH)
        except ValueError as e:
            raise IpoAuthenticationException(str(e)) from e

        headers = {
            **SDK_HEADERS,
            "Accept": AUTHENTICATE_ACCEPT,
            "Authorization": basic_auth_header(credentials.username, credentials.password),
        }

        try:
            async with self._create_client(credentials) as client:
                response = await client.get(auth_url, headers=headers)

        except httpx.TimeoutException as e:
            log.warning(f"IP Office authenticate timed out for {credentials.host}: {e}")
            raise IpoAuthenticationException(f"IP Office authenticate timed out: {e}") from e

        except httpx.HTTPError as e:
            log.warning(f"Cannot connect to IP Office at {credentials.host}: {e}")
            raise IpoAuthenticationException(f"Cannot connect to IP Office: {e}") from e

        content_type = response.headers.get("content-type")

        if not response.is_success:
            log.error(f"IP Office authenticate failed for {credentials.host}: HTTP {response.status_code}")
            raise IpoAuthenticationException(
                f"IP Office authenticate failed (HTTP {response.status_code}, "
                f"content-type: {content_type or 'none'}): {response.text or response.reason_phrase}",
                status_code=response.status_code,
                content_type=content_type,
                body=response.text,
            )

        cookie_values = collect_set_cookie_values(response.headers)
        if not cookie_values:
            raise IpoAuthenticationException(
                "IP Office authenticate did not return session cookies (Set-Cookie missing)",
                status_code=response.status_code,
                content_type=content_type,
            )

        cookie_header = merge_session_cookies(cookie_values)
        has_session_id, has_sdk_token = find_session_tokens(cookie_header)
        if not (has_session_id and has_sdk_token):
            missing = [
                label
                for label, present in (("JSESSIONID", has_session_id), ("SDK-Token", has_sdk_token))
                if not present
            ]
            log.error(f"IP Office at {credentials.host} returned HTTP {response.status_code} without {missing}")
            raise IpoAuthenticationException(
                f"IP Office authenticate returned no usable session (missing {', '.join(missing)})",
                status_code=response.status_code,
                content_type=content_type,
            )

        log.debug(f"Successfully authenticated to IP Office at {credentials.host}")
        return IpoSession(cookie_header=cookie_header)

    async def deauthenticate(self, credentials: IpoCredentials, session: IpoSession) -> IpoDeauthResult:
        """Close a session, trying the SDK path first and the legacy path second.

        Never raises: the outcome is only meant for diagnostics.

        Returns:
            IpoDeauthResult of the last attempted candidate
        """
        headers = {**SDK_HEADERS, "Accept": AUTHENTICATE_ACCEPT, "Cookie": session.cookie_header}

        result = IpoDeauthResult(ok=False)
        try:
            base_url = build_base_url(credentials.host)
            candidates = [
                build_url(base_url, AUTHENTICATE_PATH),
                build_url(base_url.replace(SDK_BASE_PATH, LEGACY_BASE_PATH), AUTHENTICATE_PATH),
            ]
            async with self._create_client(credentials) as client:
                for url in candidates:
                    try:
                        response = await client.delete(url, headers=headers)
                    except httpx.HTTPError as e:
                        log.debug(f"IP Office logout via {url} failed: {e}")
                        result = IpoDeauthResult(ok=False, text=str(e), url=url)
                        continue

                    result = IpoDeauthResult(
                        ok=response.is_success,
                        status_code=response.status_code,
                        text=response.text,
                        url=url,
                    )
                    if response.is_success:
                        break

        except Exception as e:
            log.debug(f"IP Office logout for {credentials.host} could not be attempted: {e}")
            result = IpoDeauthResult(ok=False, text=str(e))

        return result

    async def request(
        self,
        credentials: IpoCredentials,
        session: IpoSession,
        path: str,
        method: str = "GET",
        body: Any = None,
        target_name: str | None = None,
    ) -> IpoRawResponse:
        """Issue one authenticated call against a resource path.

        Args:
            credentials: Appliance host and account
            session: Session opened by ``authenticate``
            path: Resource path, e.g. ``/admin/v1/users?guid=...``
            method: HTTP method (GET, POST, PUT, DELETE)
            body: JSON-serializable payload, sent when not None
            target_name: Name of the account targeted by the call, if any

        Returns:
            IpoRawResponse with the status, body text and content type

        Raises:
            IpoProtectedIdentityException: On a DELETE targeting NoUser (no call is made)
            IpoRequestException: On an unusable host, transport failure or non-2xx status
        """
        method = method.upper()
        if method == "DELETE" and is_protected_identity(path, target_name):
            log.warning(f"Refusing to delete the protected NoUser account on {credentials.host}")
            raise IpoProtectedIdentityException("The NoUser account is protected and cannot be deleted")

        try:
            url = build_url(build_base_url(credentials.host), path)
        except ValueError as e:
            raise IpoRequestException(str(e)) from e

        headers = {**SDK_HEADERS, "Accept": REQUEST_ACCEPT, "Cookie": session.cookie_header}
        content = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            content = json.dumps(body)

        try:
            async with self._create_client(credentials) as client:
                response = await client.request(method, url, headers=headers, content=content)

        except httpx.TimeoutException as e:
            log.warning(f"IP Office request timed out: {method} {path} on {credentials.host}: {e}")
            self._log_exchange(IpoRequestLogEntry(method=method, url=url, ok=False, error=str(e), request_body=body))
            raise IpoRequestException(f"IP Office request timed out: {e}") from e

        except httpx.HTTPError as e:
            log.warning(f"Cannot reach IP Office at {credentials.host} for {method} {path}: {e}")
            self._log_exchange(IpoRequestLogEntry(method=method, url=url, ok=False, error=str(e), request_body=body))
            raise IpoRequestException(f"Cannot connect to IP Office: {e}") from e

        self._log_exchange(
            IpoRequestLogEntry(
                method=method,
                url=url,
                ok=response.is_success,
                status_code=response.status_code,
                request_body=body,
                response_text=response.text,
            )
        )

        if not response.is_success:
            log.error(f"IP Office request failed: {method} {path} -> HTTP {response.status_code}")
            raise IpoRequestException(
                f"IP Office request failed (HTTP {response.status_code}): {response.text or response.reason_phrase}",
                status_code=response.status_code,
                body=response.text,
            )

        return IpoRawResponse(
            status_code=response.status_code,
            text=response.text,
            content_type=response.headers.get("content-type"),
        )

    async def with_session(
        self,
        credentials: IpoCredentials,
        work: Callable[[IpoSession], Awaitable[T]],
    ) -> T:
        """Authenticate, run ``work`` with the session, always log out.

        Authentication failures propagate before any work runs. Whatever
        ``work`` returns or raises is propagated unchanged; the logout outcome
        is discarded.
        """
        with tracer.start_as_current_span("ipo_with_session") as span:
            span.set_attribute("ipo.host", credentials.host)

            session = await self.authenticate(credentials)
            try:
                return await work(session)
            finally:
                outcome = await self.deauthenticate(credentials, session)
                if not outcome.ok:
                    log.debug(
                        f"IP Office logout not confirmed for {credentials.host}: "
                        f"status={outcome.status_code} url={outcome.url}"
                    )

    def _log_exchange(self, entry: IpoRequestLogEntry) -> None:
        if self._request_logger is None:
            return
        try:
            self._request_logger.log(entry)
        except Exception as e:
            log.debug(f"IP Office request logging failed: {e}")

    @staticmethod
    def configure(builder: "WebApplicationBuilder", request_logger: IpoRequestLogger | None = None) -> None:
        """Configure the IP Office API client in the application builder.

        Reads transport timeouts from application settings and registers a
        single client instance in the DI container.

        Args:
            builder: WebApplicationBuilder instance for service registration
            request_logger: Logger receiving resource exchanges
        """
        from application.settings import app_settings

        log.info("🔧 Configuring IP Office API client...")

        client = IpoApiClient(
            timeout=httpx.Timeout(
                connect=app_settings.ipo_connect_timeout,
                read=app_settings.ipo_read_timeout,
                write=app_settings.ipo_write_timeout,
                pool=app_settings.ipo_pool_timeout,
            ),
            request_logger=request_logger,
        )

        builder.services.add_singleton(IpoApiClient, singleton=client)
        log.info("✅ IP Office API client registered in DI container")
