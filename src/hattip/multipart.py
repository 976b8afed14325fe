"""Streaming multipart/form-data request bodies."""

import io
import logging
import os
import time
from pathlib import Path
from typing import Dict, List, NamedTuple, Union

from urllib3.fields import guess_content_type

from hattip.connection import read_fully
from hattip.transport import TransportConnection

logger = logging.getLogger(__name__)

LINE_FEED = "\r\n"
FILE_CHUNK_SIZE = 4096

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_DIGITS[remainder])
    return "".join(reversed(digits))


class MultipartResult(NamedTuple):
    code: int
    headers: Dict[str, List[str]]
    data: bytes


class MultipartHelper:
    """Writes a multipart/form-data body onto an unsent connection.

    Call :meth:`add_form_field` and :meth:`add_file_part` any number of times, in
    any order, then :meth:`finish` exactly once to send the request and read the
    reply. Response headers are not collected on this path; ``finish`` always
    reports an empty header mapping.

    Example:
        with RequestsTransport() as transport:
            con = transport.open("https://example.com/upload")
            form = MultipartHelper(con, "UTF-8")
            form.add_form_field("name", "value")
            form.add_file_part("attachment", Path("report.pdf"))
            code, _, body = form.finish()
    """

    def __init__(self, connection: TransportConnection, charset: str):
        self.connection = connection
        self.charset = charset
        self.boundary = "chip" + str(id(self)) + _base36(int(time.time() * 1000))
        self._finished = False

        connection.use_caches = False
        connection.do_output = True
        connection.set_header("Content-Type", "multipart/form-data; boundary=" + self.boundary)
        self._output = connection.output_stream()
        self._writer = io.TextIOWrapper(self._output, encoding=charset, newline="")
        logger.debug(f"Multipart body for {connection.url} uses boundary {self.boundary}")

    def _check_open(self) -> None:
        if self._finished:
            raise RuntimeError("Multipart body is already finished")

    def add_form_field(self, name: str, value: str) -> None:
        self._check_open()
        self._writer.write("--" + self.boundary + LINE_FEED)
        self._writer.write(f'Content-Disposition: form-data; name="{name}"' + LINE_FEED)
        self._writer.write("Content-Type: text/plain; charset=" + self.charset + LINE_FEED)
        self._writer.write(LINE_FEED)
        self._writer.write(value + LINE_FEED)
        self._writer.flush()

    def add_file_part(self, field_name: str, upload_file: Union[str, os.PathLike]) -> None:
        self._check_open()
        file_name = Path(upload_file).name
        self._writer.write("--" + self.boundary + LINE_FEED)
        self._writer.write(f'Content-Disposition: form-data; name="{field_name}"; filename="{file_name}"' + LINE_FEED)
        self._writer.write("Content-Type: " + guess_content_type(file_name) + LINE_FEED)
        self._writer.write("Content-Transfer-Encoding: binary" + LINE_FEED)
        self._writer.write(LINE_FEED)
        self._writer.flush()

        # File bytes bypass the text writer so the charset never touches them
        with open(upload_file, "rb") as source:
            for chunk in iter(lambda: source.read(FILE_CHUNK_SIZE), b""):
                self._output.write(chunk)
        self._output.flush()

        self._writer.write(LINE_FEED)
        self._writer.flush()

    def finish(self) -> MultipartResult:
        """Close the body, send the request and return ``(status, {}, body)``.

        The body is only read for a 200 reply; any other status comes back with
        empty data. The connection is closed on every path.
        """
        self._check_open()
        self._finished = True
        try:
            self._writer.write(LINE_FEED)
            self._writer.flush()
            self._writer.write("--" + self.boundary + "--" + LINE_FEED)
            self._writer.close()

            status = self.connection.status_code()
            logger.debug(f"Multipart upload to {self.connection.url} returned {status}")
            if status == 200:
                return MultipartResult(200, {}, read_fully(self.connection.input_stream()))
            return MultipartResult(status, {}, b"")
        finally:
            self.connection.close()
