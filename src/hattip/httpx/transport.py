"""Transport backed by a synchronous httpx Client."""

import io
import logging
import threading
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import BinaryIO, Dict, Iterable, Iterator, List, Optional

import httpx

from hattip._user_agent import get_user_agent
from hattip.config import Profile, TransportConfig, load_transport_config, resolve_profile
from hattip.transport import Transport, TransportConnection

logger = logging.getLogger(__name__)


class _ByteIteratorReader(io.RawIOBase):
    """File-like reader over an iterator of byte chunks."""

    def __init__(self, chunks: Iterable[bytes]):
        self._chunks: Iterator[bytes] = iter(chunks)
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size


class HttpxConnection(TransportConnection):
    def __init__(self, url: str, client: httpx.Client, profile: Profile) -> None:
        super().__init__(url)
        self._client = client
        self._profile = profile
        self._response: Optional[httpx.Response] = None

    def _send(self) -> None:
        request = self._client.build_request(
            self.method,
            self.url,
            headers=self.request_headers,
            content=self.body(),
            timeout=self._profile.timeout,
        )
        self._response = self._client.send(request, stream=True, follow_redirects=self._profile.follow_redirects)

    def _status(self) -> int:
        return self._response.status_code

    def _response_headers(self) -> Dict[str, List[str]]:
        headers = self._response.headers
        grouped: Dict[str, List[str]] = {}
        for raw_name, raw_value in headers.raw:
            grouped.setdefault(raw_name.decode(headers.encoding), []).append(raw_value.decode(headers.encoding))
        return grouped

    def _open_input(self) -> BinaryIO:
        return _ByteIteratorReader(self._response.iter_bytes())

    def _close(self) -> None:
        if self._response is not None:
            self._response.close()


class HttpxTransport(Transport):
    """Opens connections through httpx.

    Repeated request header names are sent as separate header lines. TLS
    verification is a client-level setting in httpx, so one client is kept per
    ``verify`` value used by the resolved profiles.
    Clients never store cookies.
    """

    def __init__(
        self,
        *,
        config: Optional[TransportConfig] = None,
        profile_name: Optional[str] = None,
        **kwargs,
    ):
        """Initialize the transport.

        Args:
            config: Transport settings. Loaded from the default config path when omitted.
            profile_name: Force a specific profile instead of matching on the URL host.
            **kwargs: Additional arguments passed to each httpx.Client (e.g. proxy, cert).
        """
        self._config = config if config is not None else load_transport_config()
        self._profile_name = profile_name
        self._client_kwargs = kwargs
        self._clients: Dict[bool, httpx.Client] = {}
        self._lock = threading.Lock()

    def _client_for(self, profile: Profile) -> httpx.Client:
        with self._lock:
            client = self._clients.get(profile.verify)
            if client is None:
                headers = dict(self._client_kwargs.get("headers", {}))
                headers.setdefault("User-Agent", get_user_agent(f"python-httpx/{httpx.__version__}"))
                kwargs = {**self._client_kwargs, "headers": headers}
                jar = CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))
                client = httpx.Client(verify=profile.verify, cookies=jar, **kwargs)
                self._clients[profile.verify] = client
            return client

    def open(self, url: str) -> HttpxConnection:
        profile = resolve_profile(self._config, url, self._profile_name)
        logger.debug(f"Opening {url} with profile {profile.name}")
        return HttpxConnection(url, self._client_for(profile), profile)

    def close(self) -> None:
        for client in self._clients.values():
            client.close()
        self._clients.clear()
