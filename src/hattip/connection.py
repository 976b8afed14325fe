"""Execution of a built Request: one network round trip, buffered into a Response."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, BinaryIO, Optional

from hattip.either import Either, Left, Right
from hattip.expectations import first_violation
from hattip.models import ERR_EXCEPTION_OCCURRED, ERR_NOT_HTTP_SUCCESS, HttpError, Response
from hattip.option import Nothing, Some
from hattip.transport import Transport, default_transport

if TYPE_CHECKING:
    from hattip.request import Request

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 16384


def read_fully(stream: BinaryIO, chunk_size: int = READ_CHUNK_SIZE) -> bytes:
    """Read ``stream`` to end-of-stream in fixed-size chunks."""
    buffer = io.BytesIO()
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        buffer.write(chunk)
    return buffer.getvalue()


class HttpConnection:
    """A Request bound to a transport, ready to be executed.

    Nothing touches the network until :meth:`response` is called. Each call to
    :meth:`response` performs a fresh round trip.
    """

    def __init__(self, request: Request, transport: Optional[Transport] = None):
        self.request = request
        self.transport = transport

    def response(self) -> Either[HttpError, Response]:
        """Perform the call and return ``Right(response)`` or ``Left(error)``.

        Only a 200 status counts as success; the body is then read completely and
        the request's expectations are checked in order. Exceptions raised by the
        transport become ``err.exception.occurred``. Exceptions raised by the
        expectations themselves are not caught.
        """
        try:
            transport = self.transport or default_transport()
            with self.request.open(transport) as con:
                status = con.status_code()
                logger.debug(f"Http {con.method} for {self.request.url} returned {status}")
                if status != 200:
                    return Left(HttpError(Some(status), ERR_NOT_HTTP_SUCCESS))
                headers = con.headers()
                response = Response(status, headers, read_fully(con.input_stream()))
        except Exception as e:
            logger.error(f"Exception {e!r} during {self.request.method.value} {self.request.url}")
            return Left(HttpError(Nothing, ERR_EXCEPTION_OCCURRED, Some(e)))

        return first_violation(response, self.request.expectations).fold(
            lambda: Right(response),
            Left,
        )
