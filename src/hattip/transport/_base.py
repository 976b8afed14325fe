from __future__ import annotations

import io
from abc import ABC, abstractmethod
from typing import BinaryIO, Dict, List, Optional, Tuple


class _RequestBody(io.BytesIO):
    """Request body buffer that keeps its contents after the writer closes it."""

    payload: Optional[bytes] = None

    def close(self) -> None:
        if not self.closed:
            self.payload = self.getvalue()
        super().close()

    def contents(self) -> bytes:
        return self.payload if self.closed else self.getvalue()


class TransportConnection(ABC):
    """A single HTTP exchange with a remote server.

    Request properties (method, headers, body) are collected first; the request is
    sent the first time the status, headers or input stream are asked for. Always
    close the connection, or use it as a context manager.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.method = "GET"
        self.request_headers: List[Tuple[str, str]] = []
        self.do_output = False
        self.use_caches = True
        self.closed = False
        self._body: Optional[_RequestBody] = None
        self._sent = False

    def set_method(self, method: str) -> None:
        if self._sent:
            raise RuntimeError("Cannot change the method after the request was sent")
        self.method = method.upper()

    def add_header(self, name: str, value: str) -> None:
        """Add a header, keeping any earlier values for the same name."""
        if self._sent:
            raise RuntimeError("Cannot add headers after the request was sent")
        self.request_headers.append((name, value))

    def set_header(self, name: str, value: str) -> None:
        """Set a header, replacing every earlier value for the same name."""
        if self._sent:
            raise RuntimeError("Cannot set headers after the request was sent")
        lowered = name.lower()
        self.request_headers = [(k, v) for k, v in self.request_headers if k.lower() != lowered]
        self.request_headers.append((name, value))

    def output_stream(self) -> BinaryIO:
        if not self.do_output:
            raise RuntimeError("Connection is not configured for output, set do_output first")
        if self._sent:
            raise RuntimeError("Cannot write a request body after the request was sent")
        if self._body is None:
            # A GET with a body is sent as POST
            if self.method == "GET":
                self.method = "POST"
            self._body = _RequestBody()
        return self._body

    def body(self) -> Optional[bytes]:
        if self._body is None:
            return None
        return self._body.contents()

    def status_code(self) -> int:
        self._ensure_sent()
        return self._status()

    def headers(self) -> Dict[str, List[str]]:
        self._ensure_sent()
        return self._response_headers()

    def input_stream(self) -> BinaryIO:
        self._ensure_sent()
        return self._open_input()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._sent:
            self._close()

    def _ensure_sent(self) -> None:
        if self.closed:
            raise RuntimeError("Connection is closed")
        if not self._sent:
            self._send()
            self._sent = True

    @abstractmethod
    def _send(self) -> None:
        """Send the request and keep the (streaming) response."""

    @abstractmethod
    def _status(self) -> int:
        """Status code of the final response."""

    @abstractmethod
    def _response_headers(self) -> Dict[str, List[str]]:
        """Response headers, each name mapped to its values in received order."""

    @abstractmethod
    def _open_input(self) -> BinaryIO:
        """Readable stream over the response body."""

    @abstractmethod
    def _close(self) -> None:
        """Release the response and its socket."""

    def __enter__(self) -> TransportConnection:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class Transport(ABC):
    """Opens connections to URLs."""

    @abstractmethod
    def open(self, url: str) -> TransportConnection:
        """Return an unsent connection to ``url``."""

    def close(self) -> None:
        """Release pooled resources held by the underlying HTTP library."""

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
