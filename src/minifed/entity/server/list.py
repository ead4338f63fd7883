import json
import logging

from minifed.entity.server import Endpoint
from minifed.exception import UnsupportedParameter
from minifed.message import ListRequest
from minifed.message import STATUS_ACTIVE

logger = logging.getLogger(__name__)

# Answering these requires information about the subordinates that a trust store
# doesn't hold.
UNSUPPORTED_PARAMETERS = ["trust_marked", "trust_mark_type", "trust_mark_id", "intermediate"]


class List(Endpoint):
    request_cls = ListRequest
    name = "list"
    endpoint_name = 'federation_list_endpoint'

    def __init__(self, upstream_get, subordinate=None, **kwargs):
        Endpoint.__init__(self, upstream_get, **kwargs)
        self.subordinate = subordinate

    def parse_request(self, request=None):
        _unsupported = [p for p in UNSUPPORTED_PARAMETERS if p in (request or {})]
        if _unsupported:
            raise UnsupportedParameter(f"Unsupported parameter(s): {', '.join(_unsupported)}")
        return Endpoint.parse_request(self, request)

    def filter(self, entity_type: str = ''):
        match = []
        for entity_id, info in self.subordinate.items():
            if info["status"] != STATUS_ACTIVE:
                continue
            if entity_type and entity_type not in info["entity_types"]:
                continue
            match.append(entity_id)
        return match

    def process_request(self, request=None, **kwargs):
        _entity_type = ''
        if request:
            _entity_type = request.get("entity_type", '')
        return {'response': json.dumps(self.filter(entity_type=_entity_type))}
