import logging
from importlib.metadata import PackageNotFoundError, version
from logging import NullHandler

logging.getLogger(__name__).addHandler(NullHandler())

try:
    __version__ = version("hattip")
except PackageNotFoundError:
    __version__ = "0.0.0"

from hattip.either import Either, Left, Right  # noqa: E402
from hattip.models import (  # noqa: E402
    ERR_EXCEPTION_OCCURRED,
    ERR_NOT_HTTP_SUCCESS,
    Credentials,
    HttpError,
    HttpMethod,
    Response,
)
from hattip.multipart import MultipartHelper  # noqa: E402
from hattip.option import Nothing, Option, Some  # noqa: E402
from hattip.request import Request, http  # noqa: E402

__all__ = [
    "ERR_EXCEPTION_OCCURRED",
    "ERR_NOT_HTTP_SUCCESS",
    "Credentials",
    "Either",
    "HttpError",
    "HttpMethod",
    "Left",
    "MultipartHelper",
    "Nothing",
    "Option",
    "Request",
    "Response",
    "Right",
    "Some",
    "http",
]
