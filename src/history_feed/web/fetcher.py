"""SSRF-safe page fetcher that returns cleaned page text for chat context."""

from __future__ import annotations

import ipaddress
import logging
import socket
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from history_feed.exceptions import FetchError

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 10_000

_ALLOWED_SCHEMES = {"http", "https"}

_BLOCKED_NETWORKS = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]

_UNWANTED_TAGS = ["script", "style", "noscript", "iframe", "svg"]


def _validate_url(url: str, allow_private: bool = False) -> tuple[bool, str | None]:
    """Validate a URL for safety. Returns (is_safe, error_message)."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False, "Invalid URL format"

    if parsed.scheme not in _ALLOWED_SCHEMES:
        return False, f"Blocked URL scheme: {parsed.scheme}. Only http/https allowed."

    hostname = parsed.hostname
    if not hostname:
        return False, "URL has no hostname"

    if allow_private:
        return True, None

    if hostname in ("localhost", "0.0.0.0"):
        return False, "Blocked: localhost access not allowed"

    try:
        addr_infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror:
        return False, f"Cannot resolve hostname: {hostname}"
    for addr_info in addr_infos:
        ip = ipaddress.ip_address(addr_info[4][0])
        for network in _BLOCKED_NETWORKS:
            if ip in network:
                return False, f"Blocked: URL resolves to private/internal IP ({ip})"

    return True, None


def extract_text(html: str, max_length: int = MAX_CONTENT_LENGTH) -> str:
    """Visible text of an HTML document, whitespace-collapsed and truncated."""
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(_UNWANTED_TAGS):
        element.decompose()
    root = soup.body or soup
    text = " ".join(root.get_text(separator=" ").split())
    return text[:max_length]


class PageFetcher:
    """Fetch a visited page and reduce it to plain text.

    Args:
        max_response_bytes: Maximum response size in bytes (default 1MB).
        max_redirects: Maximum number of redirects to follow (default 5).
        max_length: Maximum length of the extracted text.
        allow_private_networks: Skip the private/loopback address check.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        max_response_bytes: int = 1_048_576,
        max_redirects: int = 5,
        max_length: int = MAX_CONTENT_LENGTH,
        allow_private_networks: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.max_response_bytes = max_response_bytes
        self.max_redirects = max_redirects
        self.max_length = max_length
        self.allow_private_networks = allow_private_networks
        self.transport = transport

    def _check(self, url: str, prefix: str = "") -> None:
        is_safe, error = _validate_url(url, allow_private=self.allow_private_networks)
        if not is_safe:
            raise FetchError(f"{prefix}{error}")

    async def fetch_text(self, url: str) -> str:
        """Fetch ``url`` and return its cleaned text content."""
        self._check(url)

        try:
            async with httpx.AsyncClient(
                timeout=10.0,
                follow_redirects=False,
                transport=self.transport,
            ) as client:
                current_url = url
                response = None
                for _ in range(self.max_redirects):
                    response = await client.get(
                        current_url,
                        headers={"User-Agent": "HistoryFeed/1.0"},
                    )
                    if response.is_redirect and response.next_request is not None:
                        redirect_url = str(response.next_request.url)
                        self._check(redirect_url, prefix="Redirect blocked: ")
                        current_url = redirect_url
                    else:
                        break

                if response is None:
                    raise FetchError("No response received")

                if len(response.content) > self.max_response_bytes:
                    raise FetchError(
                        f"Response too large (>{self.max_response_bytes} bytes)"
                    )

                response.raise_for_status()

            content_type = response.headers.get("content-type", "")
            raw_text = response.text
            if "html" in content_type or raw_text.strip().startswith("<"):
                text = extract_text(raw_text, self.max_length)
            else:
                text = " ".join(raw_text.split())[: self.max_length]
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(f"Fetch failed: {e}") from e

        logger.info("Fetched %d characters from %s", len(text), url)
        return text
