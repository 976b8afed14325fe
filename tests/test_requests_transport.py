"""Tests for the requests-backed transport."""

import unittest
from unittest.mock import MagicMock

from _server import LocalServer

from hattip.config import Profile, TransportConfig
from hattip.requests.transport import RequestsConnection, RequestsTransport, _fold_headers


class TestFoldHeaders(unittest.TestCase):
    def test_repeated_names_are_joined(self):
        folded = _fold_headers([("X-A", "1"), ("x-a", "2"), ("X-B", "3")])
        self.assertEqual(folded, {"X-A": "1, 2", "X-B": "3"})

    def test_empty(self):
        self.assertEqual(_fold_headers([]), {})


class TestRequestsConnection(unittest.TestCase):
    def _connection(self):
        session = MagicMock()
        profile = Profile(name="test", timeout=7, verify=False, follow_redirects=False)
        return RequestsConnection("http://host/p", session, profile), session

    def test_send_passes_profile_settings(self):
        con, session = self._connection()
        con.add_header("foo", "bar")
        con.add_header("foo", "baz")

        con.status_code()

        session.request.assert_called_once_with(
            "GET",
            "http://host/p",
            headers={"foo": "bar, baz"},
            data=None,
            stream=True,
            timeout=7,
            verify=False,
            allow_redirects=False,
        )

    def test_request_is_sent_once(self):
        con, session = self._connection()
        con.status_code()
        con.headers()
        con.input_stream()
        session.request.assert_called_once()

    def test_close_releases_response(self):
        con, session = self._connection()
        con.status_code()
        con.close()
        session.request.return_value.close.assert_called_once()

    def test_close_before_send_does_not_touch_session(self):
        con, session = self._connection()
        con.close()
        session.request.assert_not_called()
        with self.assertRaises(RuntimeError):
            con.status_code()

    def test_headers_after_send_are_rejected(self):
        con, _ = self._connection()
        con.status_code()
        with self.assertRaises(RuntimeError):
            con.add_header("late", "1")

    def test_output_requires_do_output(self):
        con, _ = self._connection()
        with self.assertRaises(RuntimeError):
            con.output_stream()

    def test_body_turns_get_into_post(self):
        con, session = self._connection()
        con.do_output = True
        con.output_stream().write(b"payload")
        con.status_code()
        args, kwargs = session.request.call_args
        self.assertEqual(args[0], "POST")
        self.assertEqual(kwargs["data"], b"payload")


class TestRequestsTransportAgainstServer(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.server = LocalServer().start()

    @classmethod
    def tearDownClass(cls):
        cls.server.stop()

    def setUp(self):
        self.transport = RequestsTransport(config=TransportConfig())

    def tearDown(self):
        self.transport.close()

    def test_status_headers_and_body(self):
        with self.transport.open(self.server.url("/returnedHeaders")) as con:
            self.assertEqual(con.status_code(), 200)
            headers = con.headers()
            self.assertEqual(con.input_stream().read(), b"returnedHeaders")

        self.assertEqual(headers["foo"], ["bar"])
        self.assertEqual(headers["multi"], ["1", "2"])

    def test_sets_user_agent(self):
        with self.transport.open(self.server.url("/hello")) as con:
            con.status_code()
        self.assertTrue(self.server.last_headers()["user-agent"].startswith("hattip/"))

    def test_caller_user_agent_wins(self):
        with self.transport.open(self.server.url("/hello")) as con:
            con.add_header("User-Agent", "custom/1.0")
            con.status_code()
        self.assertEqual(self.server.last_headers()["user-agent"], "custom/1.0")

    def test_redirects_can_be_disabled(self):
        config = TransportConfig(profiles={"p": Profile(name="p", follow_redirects=False)})
        with RequestsTransport(config=config, profile_name="p") as transport:
            with transport.open(self.server.url("/redirectedFrom")) as con:
                self.assertEqual(con.status_code(), 301)


if __name__ == "__main__":
    unittest.main()
