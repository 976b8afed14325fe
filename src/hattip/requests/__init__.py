from hattip.requests.transport import RequestsConnection, RequestsTransport

__all__ = ["RequestsConnection", "RequestsTransport"]
