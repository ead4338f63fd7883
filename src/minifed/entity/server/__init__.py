# Basic Endpoint class shared by the federation endpoints
import logging
from typing import Callable
from typing import Optional

from idpyoidc.exception import MissingRequiredAttribute
from idpyoidc.message import Message

from minifed.exception import InvalidRequest

logger = logging.getLogger(__name__)


class Endpoint(object):
    request_cls = Message
    response_content_type = "application/json"
    name = ""
    endpoint_name = ""

    def __init__(self, upstream_get: Callable, path: Optional[str] = "", **kwargs):
        self.upstream_get = upstream_get
        self.path = path
        self.kwargs = kwargs

    @property
    def full_path(self) -> str:
        _entity_id = self.upstream_get("attribute", "entity_id")
        return f"{_entity_id.rstrip('/')}{self.path}"

    def parse_request(self, request: Optional[dict] = None) -> Message:
        _req = self.request_cls(**(request or {}))
        try:
            _req.verify()
        except (MissingRequiredAttribute, ValueError) as err:
            raise InvalidRequest(f"{self.name}: {err}")
        return _req

    def process_request(self, request: Optional[Message] = None, **kwargs) -> dict:
        raise NotImplementedError()
