import threading
from typing import Optional

from hattip.transport._base import Transport, TransportConnection

__all__ = ["Transport", "TransportConnection", "default_transport"]

_default: Optional[Transport] = None
_default_lock = threading.Lock()


def default_transport() -> Transport:
    """Return the shared requests-based transport, creating it on first use."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                from hattip.requests.transport import RequestsTransport

                _default = RequestsTransport()
    return _default
