from hattip.httpx.transport import HttpxConnection, HttpxTransport

__all__ = ["HttpxConnection", "HttpxTransport"]
