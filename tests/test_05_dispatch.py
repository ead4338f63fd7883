import pytest
from werkzeug.test import Client
from werkzeug.wrappers import Request
from werkzeug.wrappers import Response

from minifed.dispatch import HostDispatcher
from minifed.dispatch import strip_port
from minifed.exception import ConfigError


def named_app(name):
    @Request.application
    def app(request):
        return Response(f"{name} {request.path}")

    return app


@pytest.mark.parametrize("host, expected", [
    ("ta-a.example.com", "ta-a.example.com"),
    ("ta-a.example.com:8080", "ta-a.example.com"),
    ("TA-A.Example.com:443", "ta-a.example.com"),
    ("ta-a.example.com.", "ta-a.example.com"),
    ("ta-a.example.com.:8080", "ta-a.example.com"),
    ("[::1]:8080", "::1"),
    ("", ""),
])
def test_strip_port(host, expected):
    assert strip_port(host) == expected


class TestHostDispatcher(object):

    @pytest.fixture(autouse=True)
    def create_dispatcher(self):
        self.dispatcher = HostDispatcher()
        self.dispatcher.register("ta-a.example.com", named_app("TA-A"))
        self.dispatcher.register("op-a.example.com", named_app("OP-A"))
        self.client = Client(self.dispatcher)

    def test_route_by_host(self):
        for host, name in [("ta-a.example.com", "TA-A"), ("op-a.example.com", "OP-A")]:
            resp = self.client.get("/fetch", base_url=f"http://{host}")
            assert resp.status_code == 200
            assert resp.get_data(as_text=True) == f"{name} /fetch"

    def test_port_ignored(self):
        resp = self.client.get("/list", base_url="http://ta-a.example.com:8080")
        assert resp.get_data(as_text=True) == "TA-A /list"
        resp = self.client.get("/list", base_url="https://op-a.example.com:4433")
        assert resp.get_data(as_text=True) == "OP-A /list"

    def test_unknown_host(self):
        resp = self.client.get("/", base_url="http://localhost:8080")
        assert resp.status_code == 404
        assert resp.json["error"] == "not_found"

    def test_get_app(self):
        assert self.dispatcher.get_app("ta-a.example.com:8080") is self.dispatcher.apps[
            "ta-a.example.com"]
        assert self.dispatcher.get_app("im-a.example.com") is None

    def test_collision(self):
        with pytest.raises(ConfigError):
            self.dispatcher.register("TA-A.example.com:9000", named_app("TA-A2"))
        resp = self.client.get("/", base_url="http://ta-a.example.com")
        assert resp.get_data(as_text=True) == "TA-A /"

    def test_fully_qualified_host(self):
        resp = self.client.get("/list", base_url="http://ta-a.example.com.:8080")
        assert resp.status_code == 200
        assert resp.get_data(as_text=True) == "TA-A /list"

    def test_register_without_host(self):
        with pytest.raises(ConfigError):
            self.dispatcher.register("", named_app("nobody"))


def test_last_registration_wins():
    dispatcher = HostDispatcher(allow_override=True)
    dispatcher.register("ta-a.example.com", named_app("first"))
    dispatcher.register("ta-a.example.com", named_app("second"))
    resp = Client(dispatcher).get("/", base_url="http://ta-a.example.com")
    assert resp.get_data(as_text=True) == "second /"
