"""Immutable request descriptions and the ways to execute them."""

from __future__ import annotations

import base64
import logging
from concurrent.futures import Executor, Future
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Sequence, Tuple, TypeVar, Union
from urllib.parse import urlencode, urlsplit, urlunsplit

from hattip.connection import HttpConnection
from hattip.either import Either
from hattip.expectations import Expectation
from hattip.models import Credentials, HeaderPair, HttpError, HttpMethod, ParamPair, Response
from hattip.option import Nothing, Option
from hattip.transport import Transport, TransportConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_pair(value: Any) -> bool:
    return isinstance(value, tuple) and len(value) == 2 and isinstance(value[0], str)


def _pairs(args: Sequence[Any], what: str) -> Tuple[Tuple[str, str], ...]:
    """Accept either pairs as varargs or a single sequence of pairs."""
    if len(args) == 1 and not _is_pair(args[0]):
        args = tuple(args[0])
    for pair in args:
        if not _is_pair(pair):
            raise TypeError(f"{what} must be (name, value) pairs, got {pair!r}")
    return tuple((name, value) for name, value in args)


def _callables(args: Sequence[Any]) -> Tuple[Expectation, ...]:
    if len(args) == 1 and not callable(args[0]):
        args = tuple(args[0])
    for expectation in args:
        if not callable(expectation):
            raise TypeError(f"Expectations must be callable, got {expectation!r}")
    return tuple(args)


def _check_url(url: str) -> None:
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError(f"URL is not an absolute http/https URL: {url}")


def basic_auth_header(credentials: Credentials) -> str:
    """Value of the Authorization header for HTTP Basic auth. The realm is not used."""
    token = f"{credentials.username}:{credentials.password}".encode("utf-8")
    return "Basic " + base64.b64encode(token).decode("ascii")


def _log_callback_failure(future: Future) -> None:
    error = future.exception()
    if error is not None:
        logger.error(f"Continuation raised {error!r}")


@dataclass(frozen=True)
class Request:
    """Description of an HTTP call.

    Requests never change: every ``with_*`` method returns a new Request, so a
    base request can be shared and specialised freely, also across threads.

    Example:
        result = (
            http("https://example.com/search")
            .with_params(("q", "hats"))
            .with_headers(("Accept", "text/html"))
            .perform()
        )
        result.fold(lambda err: print(err.message), lambda resp: print(resp.text()))
    """

    url: str
    method: HttpMethod = HttpMethod.GET
    params: Tuple[ParamPair, ...] = ()
    headers: Tuple[HeaderPair, ...] = ()
    credentials: Option[Credentials] = Nothing
    expectations: Tuple[Expectation, ...] = ()

    def __post_init__(self):
        if not isinstance(self.method, HttpMethod):
            object.__setattr__(self, "method", HttpMethod(str(self.method).upper()))
        object.__setattr__(self, "params", _pairs((tuple(self.params),), "Params"))
        object.__setattr__(self, "headers", _pairs((tuple(self.headers),), "Headers"))
        if not isinstance(self.credentials, Option):
            object.__setattr__(self, "credentials", Option.of(self.credentials))
        object.__setattr__(self, "expectations", _callables((tuple(self.expectations),)))

    def with_params(self, *params: Union[ParamPair, Sequence[ParamPair]]) -> Request:
        return replace(self, params=self.params + _pairs(params, "Params"))

    def with_headers(self, *headers: Union[HeaderPair, Sequence[HeaderPair]]) -> Request:
        return replace(self, headers=self.headers + _pairs(headers, "Headers"))

    def with_credentials(self, credentials: Credentials) -> Request:
        return replace(self, credentials=Option.of(credentials))

    def with_expectations(self, *expectations: Union[Expectation, Sequence[Expectation]]) -> Request:
        return replace(self, expectations=self.expectations + _callables(expectations))

    def get(self) -> Request:
        return replace(self, method=HttpMethod.GET)

    def full_url(self) -> str:
        """The URL with params appended as a percent-encoded query string."""
        query = urlencode(self.params)
        if not query.strip():
            return self.url
        parts = urlsplit(self.url)
        if parts.query:
            query = f"{parts.query}&{query}"
        return urlunsplit(parts._replace(query=query))

    def open(self, transport: Transport) -> TransportConnection:
        """Open a transport connection with method, headers and credentials applied."""
        url = self.full_url()
        _check_url(url)
        con = transport.open(url)
        try:
            con.set_method(self.method.value)
            for name, value in self.headers:
                con.add_header(name, value)
            for credentials in self.credentials:
                con.add_header("Authorization", basic_auth_header(credentials))
        except Exception:
            con.close()
            raise
        return con

    def connect(self, transport: Optional[Transport] = None) -> HttpConnection:
        return HttpConnection(self, transport)

    def perform(
        self,
        on_error: Optional[Callable[[HttpError], T]] = None,
        on_success: Optional[Callable[[Response], T]] = None,
        *,
        transport: Optional[Transport] = None,
    ) -> Union[Either[HttpError, Response], T]:
        """Execute the request.

        Without continuations the ``Either`` result is returned. With both
        ``on_error`` and ``on_success`` exactly one of them is called and its
        return value is returned.
        """
        result = self.connect(transport).response()
        if on_error is None and on_success is None:
            return result
        if on_error is None or on_success is None:
            raise ValueError("perform() takes both on_error and on_success, or neither")
        return result.fold(on_error, on_success)

    def as_callable(self, transport: Optional[Transport] = None) -> Callable[[], Either[HttpError, Response]]:
        """Deferred form: a zero-argument callable that performs the request when called."""

        def call() -> Either[HttpError, Response]:
            return self.connect(transport).response()

        return call

    def submit(self, executor: Executor, transport: Optional[Transport] = None) -> Future:
        """Run the request on ``executor`` and return a Future of the ``Either`` result."""
        return executor.submit(self.as_callable(transport))

    def perform_async(
        self,
        executor: Executor,
        on_error: Callable[[HttpError], Any],
        on_success: Callable[[Response], Any],
        *,
        transport: Optional[Transport] = None,
    ) -> None:
        """Run the request on ``executor`` and hand the outcome to one of the continuations.

        Ordering between several submitted requests is up to the executor.
        """
        future = executor.submit(self.perform, on_error, on_success, transport=transport)
        future.add_done_callback(_log_callback_failure)


def http(url: str) -> Request:
    """A GET Request for ``url``."""
    return Request(url)
