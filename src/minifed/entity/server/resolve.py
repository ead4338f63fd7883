import logging

from minifed.entity.server import Endpoint
from minifed.exception import TemporarilyUnavailable
from minifed.message import ResolveRequest

logger = logging.getLogger(__name__)


class Resolve(Endpoint):
    request_cls = ResolveRequest
    response_content_type = 'application/resolve-response+jwt'
    name = "resolve"
    endpoint_name = 'federation_resolve_endpoint'

    def __init__(self, upstream_get, **kwargs):
        Endpoint.__init__(self, upstream_get, **kwargs)

    def process_request(self, request=None, **kwargs):
        # Resolving means collecting entity configurations over the network using the
        # entities' identifiers, which don't resolve to this process.
        _trust_anchor = request.get("trust_anchor") or request.get("anchor")
        logger.info(f"Can not resolve {request['sub']} using {_trust_anchor}")
        raise TemporarilyUnavailable(
            f"Resolving {request['sub']} requires live collection of trust chains")
