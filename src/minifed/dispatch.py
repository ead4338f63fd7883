"""Many virtual hosts behind one listener."""
import logging
from typing import Callable
from typing import Optional
from urllib.parse import urlsplit

from idpyoidc.message.oauth2 import ResponseMessage
from werkzeug.wrappers import Response
from werkzeug.wsgi import get_host

from minifed.exception import ConfigError

logger = logging.getLogger(__name__)


def strip_port(host: str) -> str:
    if not host:
        return ""
    try:
        _hostname = urlsplit(f"//{host}").hostname or ""
    except ValueError:
        return ""
    # Fully qualified form, "ta-a.example.com."
    if _hostname.endswith("."):
        _hostname = _hostname[:-1]
    return _hostname


class HostDispatcher(object):
    """
    WSGI application routing each request to the application registered for the
    hostname in the request's Host header. The port is not part of the match.
    """

    def __init__(self, allow_override: Optional[bool] = False):
        self.allow_override = allow_override
        self.apps = {}

    def register(self, host: str, app: Callable):
        _host = strip_port(host)
        if not _host:
            raise ConfigError(f"Can not register an application under '{host}'")

        if _host in self.apps:
            if not self.allow_override:
                raise ConfigError(f"More than one entity uses the hostname {_host}")
            logger.warning(f"replacing the application registered for {_host}")

        self.apps[_host] = app
        logger.info(f"registered entity, host: {_host}")

    def get_app(self, host: str) -> Optional[Callable]:
        return self.apps.get(strip_port(host))

    def __call__(self, environ, start_response):
        _host = get_host(environ)
        app = self.get_app(_host)
        if app is None:
            logger.debug(f"no entity at {_host}")
            err_msg = ResponseMessage(error="not_found",
                                      error_description=f"No entity at {strip_port(_host)}")
            resp = Response(err_msg.to_json(), status=404, content_type="application/json")
            return resp(environ, start_response)
        return app(environ, start_response)
