from minifed.entity.server import Endpoint

WELL_KNOWN_PATH = "/.well-known/openid-federation"


class EntityConfiguration(Endpoint):
    response_content_type = "application/entity-statement+jwt"
    name = "entity_configuration"

    def __init__(self, upstream_get, path=WELL_KNOWN_PATH, **kwargs):
        Endpoint.__init__(self, upstream_get=upstream_get, path=path, **kwargs)

    def process_request(self, request=None, **kwargs):
        _entity = self.upstream_get("unit")
        return {"response": _entity.entity_configuration()}
