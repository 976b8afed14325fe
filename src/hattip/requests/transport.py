"""Transport backed by a requests Session."""

from __future__ import annotations

import logging
from http.cookiejar import DefaultCookiePolicy
from typing import BinaryIO, Dict, List, Optional, Sequence, Tuple

import requests
from requests import Session

from hattip._user_agent import get_user_agent
from hattip.config import Profile, TransportConfig, load_transport_config, resolve_profile
from hattip.transport import Transport, TransportConnection

logger = logging.getLogger(__name__)


def _fold_headers(pairs: Sequence[Tuple[str, str]]) -> Dict[str, str]:
    """Join repeated header names into one comma-separated value, keeping first-seen order and spelling."""
    folded: Dict[str, Tuple[str, List[str]]] = {}
    for name, value in pairs:
        folded.setdefault(name.lower(), (name, []))[1].append(value)
    return {name: ", ".join(values) for name, values in folded.values()}


class RequestsConnection(TransportConnection):
    def __init__(self, url: str, session: Session, profile: Profile) -> None:
        super().__init__(url)
        self._session = session
        self._profile = profile
        self._response: Optional[requests.Response] = None

    def _send(self) -> None:
        self._response = self._session.request(
            self.method,
            self.url,
            headers=_fold_headers(self.request_headers),
            data=self.body(),
            stream=True,
            timeout=self._profile.timeout,
            verify=self._profile.verify,
            allow_redirects=self._profile.follow_redirects,
        )
        # Let the raw stream undo gzip/deflate like iter_content would
        self._response.raw.decode_content = True

    def _status(self) -> int:
        return self._response.status_code

    def _response_headers(self) -> Dict[str, List[str]]:
        raw_headers = getattr(self._response.raw, "headers", None)
        if hasattr(raw_headers, "getlist"):
            return {name: list(raw_headers.getlist(name)) for name in raw_headers}
        return {name: [value] for name, value in self._response.headers.items()}

    def _open_input(self) -> BinaryIO:
        return self._response.raw

    def _close(self) -> None:
        if self._response is not None:
            self._response.close()


class RequestsTransport(Transport):
    """Opens connections through a requests Session.

    No retries are mounted on the session: a failed call is reported once.
    A session created here stores no cookies.

    Example:
        with RequestsTransport() as transport:
            result = http("https://example.com/").perform(transport=transport)
    """

    def __init__(
        self,
        *,
        session: Optional[Session] = None,
        config: Optional[TransportConfig] = None,
        profile_name: Optional[str] = None,
    ):
        """Initialize the transport.

        Args:
            session: Session to send requests with. A new one is created when omitted.
            config: Transport settings. Loaded from the default config path when omitted.
            profile_name: Force a specific profile instead of matching on the URL host.
        """
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = get_user_agent(f"requests/{requests.__version__}")
            # Cookies from one response are never replayed on later calls
            session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        self._session = session
        self._config = config if config is not None else load_transport_config()
        self._profile_name = profile_name

    @property
    def session(self) -> Session:
        return self._session

    def open(self, url: str) -> RequestsConnection:
        profile = resolve_profile(self._config, url, self._profile_name)
        logger.debug(f"Opening {url} with profile {profile.name}")
        return RequestsConnection(url, self._session, profile)

    def close(self) -> None:
        self._session.close()
