"""Release artifact downloads with SSL certificate handling.

Fetches the tealsp binary and its version stamp from a channel-qualified
base URL. TLS verification uses certifi's CA bundle so downloads work on
hosts whose system certificate store Python cannot read (e.g. macOS
standalone builds).
"""

from __future__ import annotations

import http.client
import socket
import ssl
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import certifi

from tealup import __version__ as TEALUP_VERSION
from tealup.bootstrap.platform import PlatformInfo
from tealup.core.errors import ConfigError, RemoteNotFoundError, TransportError
from tealup.core.logging import get_logger

LOGGER = get_logger(__name__)

# Default base URL for release downloads; channels are release tags
DEFAULT_RELEASE_BASE_URL = "https://github.com/dragmz/teal/releases/download"

# Seconds before an unresponsive channel is treated as unreachable
DEFAULT_TIMEOUT = 30.0


def get_ssl_context() -> ssl.SSLContext:
    """Get an SSL context that uses certifi's CA bundle."""
    return ssl.create_default_context(cafile=certifi.where())


def construct_artifact_url(base_url: str, channel: str, artifact: str) -> str:
    """Build ``{base}/{channel}/{artifact}``."""
    return f"{base_url.rstrip('/')}/{channel}/{artifact}"


@dataclass(frozen=True)
class RemoteRelease:
    """A binary and its version stamp fetched from one channel/platform."""

    channel: str
    platform: PlatformInfo
    binary: bytes
    version_stamp: bytes


class ReleaseClient:
    """Read-only HTTP client for the remote release channel.

    No retries are attempted; callers decide whether a failed fetch is
    worth another try.
    """

    def __init__(
        self,
        platform_info: PlatformInfo,
        base_url: str = DEFAULT_RELEASE_BASE_URL,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ) -> None:
        if not base_url.startswith("https://"):
            raise ConfigError(f"Only HTTPS release URLs are supported: {base_url}")
        self._platform = platform_info
        self._base_url = base_url
        self._timeout = timeout
        self._ssl_context: Optional[ssl.SSLContext] = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def platform(self) -> PlatformInfo:
        return self._platform

    def binary_url(self, channel: str) -> str:
        return construct_artifact_url(
            self._base_url, channel, self._platform.release_binary_name
        )

    def version_stamp_url(self, channel: str) -> str:
        return construct_artifact_url(
            self._base_url, channel, self._platform.version_stamp_name
        )

    def fetch(self, url: str) -> bytes:
        """Download ``url`` and return the response body.

        Raises:
            RemoteNotFoundError: The server answered with a non-2xx status.
            TransportError: The server could not be reached or the transfer
                was interrupted.
        """
        if self._ssl_context is None:
            self._ssl_context = get_ssl_context()

        request = Request(url, headers={"User-Agent": f"tealup/{TEALUP_VERSION}"})
        LOGGER.debug(f"GET {url}")

        try:
            with urlopen(  # nosec B310 - scheme checked in __init__
                request, timeout=self._timeout, context=self._ssl_context
            ) as response:
                status = getattr(response, "status", 200)
                if not 200 <= status < 300:
                    raise RemoteNotFoundError(url, status)
                data = response.read()
        except HTTPError as e:
            raise RemoteNotFoundError(url, e.code, str(e.reason)) from e
        except URLError as e:
            raise TransportError(
                url, f"Could not reach release channel: {e.reason}"
            ) from e
        except (socket.timeout, TimeoutError) as e:
            raise TransportError(url, f"Timed out after {self._timeout}s") from e
        except (OSError, http.client.HTTPException) as e:
            raise TransportError(url, f"Transfer failed: {e}") from e

        LOGGER.debug(f"Fetched {len(data)} bytes from {url}")
        return data

    def fetch_binary(self, channel: str) -> bytes:
        """Download the tealsp binary for this platform from ``channel``."""
        return self.fetch(self.binary_url(channel))

    def fetch_version_stamp(self, channel: str) -> bytes:
        """Download the version stamp for this platform from ``channel``."""
        return self.fetch(self.version_stamp_url(channel))

    def fetch_release(self, channel: str) -> RemoteRelease:
        """Download the binary and its version stamp concurrently.

        Returns only after both downloads succeeded; the first failure is
        raised otherwise.

        Note: the two requests are independent, so a channel republished
        between them can pair a new stamp with old binary bytes.
        """
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="tealup-fetch") as executor:
            binary_future = executor.submit(self.fetch_binary, channel)
            stamp_future = executor.submit(self.fetch_version_stamp, channel)
            binary = binary_future.result()
            version_stamp = stamp_future.result()

        LOGGER.info(
            f"Fetched tealsp {self._platform.bundle_name} from the '{channel}' channel "
            f"({len(binary) / 1024 / 1024:.1f} MB)"
        )
        return RemoteRelease(
            channel=channel,
            platform=self._platform,
            binary=binary,
            version_stamp=version_stamp,
        )
