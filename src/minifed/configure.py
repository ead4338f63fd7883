"""Reading and structuring the federation layout description."""
import logging
from collections import namedtuple
from typing import Dict
from typing import List
from typing import Optional

import yaml
from idpyoidc.util import load_config_file

from minifed.entity import DEFAULT_LIFETIME
from minifed.exception import ConfigError
from minifed.keys import DEFAULT_KEY_DEFS
from minifed.keys import DEFAULT_SIGN_ALG

logger = logging.getLogger(__name__)

EDGE_SEPARATOR = "->"

DEFAULT_WEBSERVER = {
    "domain": "0.0.0.0",
    "port": 8080,
    "debug": False
}

DEFAULT_FEDERATION = {
    "sign_alg": DEFAULT_SIGN_ALG,
    "lifetime": DEFAULT_LIFETIME,
    "key_defs": DEFAULT_KEY_DEFS,
    "subordinate_statement": {}
}

EntityConfig = namedtuple("EntityConfig", ["name", "kind", "identifier"])
EdgeConfig = namedtuple("EdgeConfig", ["head", "tail"])


def parse_edge(edge: str, index: Optional[int] = 0) -> EdgeConfig:
    """
    Parse a textual edge description.

    :param edge: A string like "TA-A -> OP-A", the head being the superior
    :param index: Position of the edge in the configuration, used in error messages
    :return: A EdgeConfig instance
    """
    if not isinstance(edge, str):
        raise ConfigError(f"edge {index}: expected a string, got {edge!r}")

    _parts = edge.split(EDGE_SEPARATOR)
    if len(_parts) != 2:
        raise ConfigError(f"edge {index}: '{edge}' is not of the form 'HEAD -> TAIL'")

    head, tail = _parts[0].strip(), _parts[1].strip()
    if not head or not tail:
        raise ConfigError(f"edge {index}: '{edge}' is missing a node name")
    return EdgeConfig(head, tail)


def parse_entities(entities: dict) -> Dict[str, EntityConfig]:
    if not isinstance(entities, dict):
        raise ConfigError("'entities' must be a mapping from name to entity description")

    res = {}
    for name, desc in entities.items():
        # YAML reads names like 1 as numbers, edges always give strings
        name = str(name)
        if desc is None:
            desc = {}
        elif not isinstance(desc, dict):
            raise ConfigError(f"{name}: entity description must be a mapping")
        res[name] = EntityConfig(name, desc.get("kind", "") or "", desc.get("identifier", "") or "")
    return res


def parse_edges(edges: list) -> List[EdgeConfig]:
    if not isinstance(edges, list):
        raise ConfigError("'edges' must be a list of 'HEAD -> TAIL' strings")
    return [parse_edge(edge, index) for index, edge in enumerate(edges)]


class Configuration(object):
    """ Harness configuration """

    def __init__(self, conf: dict):
        if not isinstance(conf, dict):
            raise ConfigError("The configuration must be a mapping")

        self.entities = parse_entities(conf.get("entities") or {})
        self.edges = parse_edges(conf.get("edges") or [])

        self.webserver = DEFAULT_WEBSERVER.copy()
        self.webserver.update(conf.get("webserver") or {})

        self.federation = DEFAULT_FEDERATION.copy()
        self.federation.update(conf.get("federation") or {})

        self.logging = conf.get("logging")

        logger.debug(f"read config: {len(self.entities)} entities, {len(self.edges)} edges")

    @classmethod
    def create_from_config_file(cls, filename: str):
        try:
            _conf = load_config_file(filename)
        except (OSError, ValueError, yaml.YAMLError) as err:
            raise ConfigError(f"Could not read configuration from {filename}: {err}")
        return cls(_conf)
