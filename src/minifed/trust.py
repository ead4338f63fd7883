import logging

from minifed.exception import ConstructionError
from minifed.message import STATUS_ACTIVE
from minifed.message import SubordinateInfo

logger = logging.getLogger(__name__)


def get_subordinate_info(node) -> SubordinateInfo:
    if node.federation_entity is None:
        raise ConstructionError(f"{node}: no federation entity attached")

    _ec = node.federation_entity.entity_configuration_payload()
    return SubordinateInfo(entity_id=_ec["sub"],
                           jwks=_ec["jwks"],
                           entity_types=list(_ec["metadata"].keys()),
                           status=STATUS_ACTIVE)


def materialize(nodes):
    """
    Let every superior know about its immediate subordinates. Must be run after all
    nodes have a federation entity attached.

    :param nodes: A :py:class:`minifed.topology.Topology` instance
    """
    for node in nodes.values():
        if not node.subordinates:
            continue

        if node.store is None:
            logger.warning(
                f"{node.name} is a {node.kind.name} and keeps no record of its subordinates "
                f"{node.subordinates}")
            continue

        for subordinate in nodes.subordinates(node.name):
            node.store.write(subordinate.entity_id, get_subordinate_info(subordinate))
            logger.info(f"established trust, parent: {node.entity_id}, "
                        f"child: {subordinate.entity_id}")
