import logging
from typing import Optional

from cryptojwt.exception import JWKESTException

from minifed.configure import Configuration
from minifed.dispatch import HostDispatcher
from minifed.entity import DEFAULT_LIFETIME
from minifed.entity import FederationEntity
from minifed.exception import ConstructionError
from minifed.keys import DEFAULT_SIGN_ALG
from minifed.topology import build
from minifed.topology import Topology
from minifed.trust import materialize

logger = logging.getLogger(__name__)

LIST_PATH = "/list"
FETCH_PATH = "/fetch"
RESOLVE_PATH = "/resolve"


def make_federation_entity(node, topology: Topology, federation: Optional[dict] = None):
    federation = federation or {}
    authority_hints = [superior.entity_id for superior in topology.superiors(node.name)]

    try:
        fed_entity = FederationEntity(
            node.entity_id,
            authority_hints=authority_hints,
            # The federation_entity metadata is filled in as endpoints are added
            metadata={},
            keyjar=node.keyjar,
            sign_alg=federation.get("sign_alg", DEFAULT_SIGN_ALG),
            lifetime=federation.get("lifetime", DEFAULT_LIFETIME),
            subordinate_statement=federation.get("subordinate_statement")
        )
    except (TypeError, ValueError) as err:
        raise ConstructionError(f"{node}: {err}")

    if node.store is not None:
        fed_entity.add_subordinate_listing_endpoint(LIST_PATH, node.store)
        fed_entity.add_fetch_endpoint(FETCH_PATH, node.store)
        # Answers with an error, there is no way to reach the other entities over the network
        fed_entity.add_resolve_endpoint(RESOLVE_PATH)

    # Signing must work before anything is served
    try:
        fed_entity.entity_configuration()
    except (JWKESTException, KeyError, ValueError) as err:
        raise ConstructionError(f"{node.name}: can not sign with {fed_entity.sign_alg}: {err!r}")

    return fed_entity


def build_federation(config: Configuration) -> Topology:
    """
    Build the entity graph, give every entity a federation entity and seed the
    superiors' trust stores.

    :param config: A :py:class:`minifed.configure.Configuration` instance
    :return: A :py:class:`minifed.topology.Topology` instance
    """
    topology = build(config.entities, config.edges, key_defs=config.federation.get("key_defs"),
                     sign_alg=config.federation.get("sign_alg", DEFAULT_SIGN_ALG))

    for node in topology.values():
        logger.debug(f"creating federation entity for {node}")
        node.federation_entity = make_federation_entity(node, topology, config.federation)

    materialize(topology)
    return topology


def make_dispatcher(topology: Topology, allow_override: Optional[bool] = False) -> HostDispatcher:
    dispatcher = HostDispatcher(allow_override=allow_override)
    for node in topology.values():
        dispatcher.register(node.hostname, node.federation_entity.wsgi_app())
    return dispatcher
