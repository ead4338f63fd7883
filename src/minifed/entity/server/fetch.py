import logging

from minifed.entity.server import Endpoint
from minifed.exception import UnknownEntity
from minifed.message import FetchRequest
from minifed.message import STATUS_ACTIVE

logger = logging.getLogger(__name__)


class Fetch(Endpoint):
    request_cls = FetchRequest
    response_content_type = "application/entity-statement+jwt"
    name = "fetch"
    endpoint_name = "federation_fetch_endpoint"

    def __init__(self, upstream_get, subordinate=None, **kwargs):
        Endpoint.__init__(self, upstream_get=upstream_get, **kwargs)
        self.subordinate = subordinate

    def process_request(self, request=None, **kwargs):
        _entity = self.upstream_get("unit")
        _issuer = _entity.entity_id
        _sub = request["sub"]

        if _sub == _issuer:
            return {"response": _entity.entity_configuration()}

        _info = self.subordinate.read(_sub)
        if not _info or _info["status"] != STATUS_ACTIVE:
            logger.debug(f"Unknown subordinate: {_sub}")
            logger.debug(f"Known subordinates: {list(self.subordinate.keys())}")
            raise UnknownEntity(f"{_sub} is not a subordinate of {_issuer}")

        _statement = {
            "jwks": _info["jwks"],
            # If nothing else is known add myself
            "authority_hints": [_issuer]
        }
        _conf = _entity.subordinate_statement
        for claim in ["metadata_policy", "constraints"]:
            if _conf.get(claim):
                _statement[claim] = _conf[claim]

        return {"response": _entity.subordinate_statement_jws(_sub, **_statement)}
