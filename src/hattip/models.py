"""Immutable values exchanged with callers: methods, credentials, responses and errors."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Tuple

from hattip.option import Nothing, Option

ERR_NOT_HTTP_SUCCESS = "err.not.http.success"
ERR_EXCEPTION_OCCURRED = "err.exception.occurred"


class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PUT = "PUT"
    DELETE = "DELETE"
    TRACE = "TRACE"


def _lift(value: Any) -> Option:
    return value if isinstance(value, Option) else Option.of(value)


@dataclass(frozen=True)
class Credentials:
    """Username and password sent as HTTP Basic auth.

    ``realm`` is kept for callers that need it but is not part of the
    Authorization header.
    """

    username: str
    password: str
    realm: Option[str] = Nothing

    def __post_init__(self):
        object.__setattr__(self, "realm", _lift(self.realm))


@dataclass(frozen=True)
class Response:
    """A fully buffered HTTP response.

    ``headers`` maps each header name, as the transport reported it, to the
    ordered values received for it. ``data`` may be given as text, which is
    stored UTF-8 encoded.
    """

    code: int
    headers: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    data: bytes = b""

    def __post_init__(self):
        headers = MappingProxyType(
            {name: (values,) if isinstance(values, str) else tuple(values) for name, values in self.headers.items()}
        )
        object.__setattr__(self, "headers", headers)
        if isinstance(self.data, str):
            object.__setattr__(self, "data", self.data.encode("utf-8"))
        else:
            object.__setattr__(self, "data", bytes(self.data))

    def __hash__(self):
        return hash((self.code, tuple(self.headers.items()), self.data))

    @classmethod
    def from_text(cls, code: int, headers: Mapping[str, Iterable[str]], text: str) -> Response:
        return cls(code, headers, text.encode("utf-8"))

    def header(self, name: str) -> Option[str]:
        """First value of header ``name``, matched case-insensitively."""
        wanted = name.lower()
        for key, values in self.headers.items():
            if key.lower() == wanted and values:
                return Option.of(values[0])
        return Nothing

    def text(self, encoding: str = "utf-8") -> str:
        return self.data.decode(encoding)

    def json(self) -> Any:
        return json.loads(self.data)


@dataclass(frozen=True)
class HttpError:
    """A failed call, described by a stable symbolic ``message`` key.

    ``code`` is absent when no HTTP response was received. ``cause`` carries the
    underlying exception for ``err.exception.occurred``.
    """

    code: Option[int]
    message: str
    cause: Option[BaseException] = Nothing

    def __post_init__(self):
        object.__setattr__(self, "code", _lift(self.code))
        object.__setattr__(self, "cause", _lift(self.cause))


ParamPair = Tuple[str, str]
HeaderPair = Tuple[str, str]
