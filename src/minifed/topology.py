"""Turns the declared entities and edges into a graph of federation entities."""
import logging
from collections import namedtuple
from typing import Dict
from typing import List
from typing import Optional
from urllib.parse import urlparse

from minifed.configure import EdgeConfig
from minifed.configure import EntityConfig
from minifed.exception import ConfigError
from minifed.exception import ConstructionError
from minifed.keys import DEFAULT_SIGN_ALG
from minifed.keys import new_signing_keys
from minifed.storage import SubordinateStore

logger = logging.getLogger(__name__)

EntityKind = namedtuple("EntityKind", ["name", "has_trust_store"])

# A leaf does nothing but publish its entity configuration.
LEAF = EntityKind("leaf", False)
INTERMEDIATE = EntityKind("intermediate", True)
TRUST_ANCHOR = EntityKind("trust-anchor", True)

ENTITY_KIND = {kind.name: kind for kind in [LEAF, INTERMEDIATE, TRUST_ANCHOR]}


class EntityNode(object):

    def __init__(self, name, kind, identifier, keyjar):
        self.name = name
        self.kind = kind
        self.identifier = identifier
        self.keyjar = keyjar
        # Names, the nodes themselves live in the Topology
        self.superiors = []
        self.subordinates = []
        self.federation_entity = None
        if kind.has_trust_store:
            self.store = SubordinateStore()
        else:
            self.store = None

    @property
    def entity_id(self) -> str:
        return self.identifier.geturl()

    @property
    def hostname(self) -> str:
        return self.identifier.hostname

    def __str__(self):
        return (f"EntityNode{{Superiors:{self.superiors}, Subordinates:{self.subordinates}, "
                f"Name:{self.name}, Kind:{self.kind.name}, Identifier:{self.entity_id}}}")


class Topology(dict):
    """Entity nodes keyed by name."""

    def superiors(self, name: str) -> List[EntityNode]:
        return [self[n] for n in self[name].superiors]

    def subordinates(self, name: str) -> List[EntityNode]:
        return [self[n] for n in self[name].subordinates]

    def find_cycle(self) -> List[str]:
        """
        Look for a cycle following superior to subordinate edges.

        :return: The names along one cycle, first name repeated at the end. Empty list if
            there is none.
        """
        _done = set()

        def _visit(name, path):
            if name in path:
                return path[path.index(name):] + [name]
            if name in _done:
                return []
            path.append(name)
            for sub in self[name].subordinates:
                _cycle = _visit(sub, path)
                if _cycle:
                    return _cycle
            path.pop()
            _done.add(name)
            return []

        for name in self:
            _cycle = _visit(name, [])
            if _cycle:
                return _cycle
        return []

    def to_dict(self) -> dict:
        return {
            name: {
                "kind": node.kind.name,
                "identifier": node.entity_id,
                "superiors": node.superiors,
                "subordinates": node.subordinates
            } for name, node in self.items()
        }


def get_kind(entity: EntityConfig) -> EntityKind:
    if not entity.kind:
        raise ConfigError(f"{entity.name}: kind must be present")
    try:
        return ENTITY_KIND[entity.kind]
    except KeyError:
        raise ConfigError(
            f"{entity.name}: unknown kind '{entity.kind}', expected one of {list(ENTITY_KIND)}")


def parse_identifier(entity: EntityConfig):
    if not entity.identifier:
        raise ConfigError(f"{entity.name}: identifier must be present")
    try:
        _url = urlparse(entity.identifier)
        _hostname = _url.hostname
    except ValueError as err:
        raise ConfigError(f"invalid url for node {entity.name}: {err}")

    if not _url.scheme or not _hostname:
        raise ConfigError(f"invalid url for node {entity.name}: '{entity.identifier}' is not absolute")
    return _url


def build(entities: Dict[str, EntityConfig],
          edges: List[EdgeConfig],
          key_defs: Optional[List[dict]] = None,
          sign_alg: Optional[str] = DEFAULT_SIGN_ALG) -> Topology:
    """
    Build the entity graph. Nodes are created the first time an edge refers to them.
    Entities that no edge refers to are not part of the result.

    :param entities: Entity configurations keyed by name
    :param edges: Superior/subordinate pairs
    :param key_defs: Key definitions used when creating signing keys
    :param sign_alg: Signing algorithm the keys are bound to
    :return: A Topology instance
    """
    for entity in entities.values():
        get_kind(entity)
        parse_identifier(entity)

    topology = Topology()

    def _get_node(name, index):
        node = topology.get(name)
        if node:
            return node

        try:
            _conf = entities[name]
        except KeyError:
            raise ConfigError(f"undefined reference to node {name} in edge {index}")

        _identifier = parse_identifier(_conf)
        try:
            _keyjar = new_signing_keys(_identifier.geturl(), key_defs, sign_alg=sign_alg)
        except Exception as err:
            raise ConstructionError(f"{name}: could not create signing keys: {err}")

        node = EntityNode(name, get_kind(_conf), _identifier, _keyjar)
        topology[name] = node
        return node

    for index, edge in enumerate(edges):
        head = _get_node(edge.head, index)
        tail = _get_node(edge.tail, index)

        if tail.name not in head.subordinates:
            head.subordinates.append(tail.name)
        if head.name not in tail.superiors:
            tail.superiors.append(head.name)

    _isolated = set(entities.keys()).difference(topology.keys())
    if _isolated:
        logger.warning(f"entities not referenced by any edge are ignored: {sorted(_isolated)}")

    _cycle = topology.find_cycle()
    if _cycle:
        logger.warning(f"trust graph contains a cycle: {' -> '.join(_cycle)}")

    logger.info(f"parsed entities: {[str(node) for node in topology.values()]}")
    return topology
