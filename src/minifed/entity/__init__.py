import logging
from functools import partial
from typing import List
from typing import Optional

from cryptojwt import KeyJar
from flask import Flask

from minifed.entity.server.entity_configuration import EntityConfiguration
from minifed.entity.server.fetch import Fetch
from minifed.entity.server.list import List as ListEndpoint
from minifed.entity.server.resolve import Resolve
from minifed.entity.statement import create_entity_statement
from minifed.entity.statement import unsigned_entity_statement
from minifed.entity.views import service_endpoint
from minifed.exception import ConstructionError
from minifed.keys import DEFAULT_SIGN_ALG
from minifed.storage import SubordinateStore

logger = logging.getLogger(__name__)

DEFAULT_LIFETIME = 60 * 60 * 24 * 365
DEFAULT_SUBORDINATE_STATEMENT_LIFETIME = 86400


class FederationEntity(object):
    """
    A federation entity with an identity, a place in the federation and the endpoints
    it answers requests on.
    """
    name = "federation_entity"

    def __init__(self,
                 entity_id: str,
                 authority_hints: Optional[List[str]] = None,
                 metadata: Optional[dict] = None,
                 keyjar: Optional[KeyJar] = None,
                 sign_alg: Optional[str] = DEFAULT_SIGN_ALG,
                 lifetime: Optional[int] = DEFAULT_LIFETIME,
                 subordinate_statement: Optional[dict] = None):
        if not entity_id:
            raise ConstructionError("A federation entity must have an entity_id")
        if keyjar is None:
            raise ConstructionError(f"{entity_id}: no signing keys")

        self.entity_id = entity_id
        self.authority_hints = list(authority_hints or [])
        self.metadata = metadata or {}
        self.keyjar = keyjar
        self.sign_alg = sign_alg
        self.lifetime = lifetime
        self.subordinate_statement = subordinate_statement or {}

        self.endpoint = {}
        self.add_endpoint(EntityConfiguration(self.unit_get))

    def unit_get(self, what, *arg):
        _func = getattr(self, f"get_{what}", None)
        if _func:
            return _func(*arg)
        return None

    def get_unit(self, *args):
        return self

    def get_attribute(self, attr, *args):
        return getattr(self, attr, None)

    def get_endpoint(self, endpoint_name, *arg):
        return self.endpoint.get(endpoint_name)

    def add_endpoint(self, endpoint):
        self.endpoint[endpoint.name] = endpoint
        logger.debug(f"{self.entity_id}: added {endpoint.name} endpoint at {endpoint.path}")
        return endpoint

    def add_subordinate_listing_endpoint(self, path: str, store: SubordinateStore):
        return self.add_endpoint(ListEndpoint(self.unit_get, path=path, subordinate=store))

    def add_fetch_endpoint(self, path: str, store: SubordinateStore):
        return self.add_endpoint(Fetch(self.unit_get, path=path, subordinate=store))

    def add_resolve_endpoint(self, path: str):
        return self.add_endpoint(Resolve(self.unit_get, path=path))

    def get_endpoint_claims(self) -> dict:
        return {endp.endpoint_name: endp.full_path for endp in self.endpoint.values() if
                endp.endpoint_name}

    def get_metadata(self) -> dict:
        metadata = {k: v.copy() for k, v in self.metadata.items()}
        _fed = metadata.get("federation_entity", {})
        _fed.update(self.get_endpoint_claims())
        metadata["federation_entity"] = _fed
        return metadata

    def entity_configuration_payload(self) -> dict:
        return unsigned_entity_statement(iss=self.entity_id,
                                         sub=self.entity_id,
                                         key_jar=self.keyjar,
                                         lifetime=self.lifetime,
                                         metadata=self.get_metadata(),
                                         authority_hints=self.authority_hints)

    def entity_configuration(self) -> str:
        return create_entity_statement(iss=self.entity_id,
                                       sub=self.entity_id,
                                       key_jar=self.keyjar,
                                       lifetime=self.lifetime,
                                       sign_alg=self.sign_alg,
                                       metadata=self.get_metadata(),
                                       authority_hints=self.authority_hints)

    def subordinate_statement_jws(self, sub: str, **kwargs) -> str:
        _lifetime = self.subordinate_statement.get("lifetime",
                                                   DEFAULT_SUBORDINATE_STATEMENT_LIFETIME)
        return create_entity_statement(iss=self.entity_id,
                                       sub=sub,
                                       key_jar=self.keyjar,
                                       lifetime=_lifetime,
                                       sign_alg=self.sign_alg,
                                       **kwargs)

    def wsgi_app(self) -> Flask:
        app = Flask(__name__)
        app.federation_entity = self
        for name, endpoint in self.endpoint.items():
            app.add_url_rule(endpoint.path, name, partial(service_endpoint, endpoint))
        return app
