import pytest

from minifed import topology as topology_module
from minifed.configure import Configuration
from minifed.configure import EdgeConfig
from minifed.configure import EntityConfig
from minifed.exception import ConfigError
from minifed.exception import ConstructionError
from minifed.keys import public_jwks
from minifed.storage import SubordinateStore
from minifed.topology import build
from minifed.topology import INTERMEDIATE
from minifed.topology import LEAF
from minifed.topology import TRUST_ANCHOR
from tests import full_path
from tests import IM_ID
from tests import OP_ID
from tests import SMALL_FEDERATION
from tests import TA_ID


def entities(*nodes):
    return {name: EntityConfig(name, kind, identifier) for name, kind, identifier in nodes}


class TestSmallFederation(object):

    @pytest.fixture(autouse=True)
    def create_topology(self):
        conf = Configuration(SMALL_FEDERATION)
        self.topology = build(conf.entities, conf.edges)

    def test_nodes(self):
        assert set(self.topology.keys()) == {"TA-A", "IM-A", "OP-A"}
        assert self.topology["TA-A"].kind == TRUST_ANCHOR
        assert self.topology["IM-A"].kind == INTERMEDIATE
        assert self.topology["OP-A"].kind == LEAF

    def test_links(self):
        assert self.topology["TA-A"].subordinates == ["OP-A", "IM-A"]
        assert self.topology["TA-A"].superiors == []
        assert self.topology["OP-A"].superiors == ["TA-A"]
        assert self.topology["IM-A"].superiors == ["TA-A"]
        assert self.topology["IM-A"].subordinates == []

    def test_lookup(self):
        assert [n.entity_id for n in self.topology.subordinates("TA-A")] == [OP_ID, IM_ID]
        assert [n.entity_id for n in self.topology.superiors("OP-A")] == [TA_ID]

    def test_identity(self):
        _node = self.topology["OP-A"]
        assert _node.entity_id == OP_ID
        assert _node.hostname == "op-a.example.com"
        _jwks = public_jwks(_node.keyjar, OP_ID)
        assert len(_jwks["keys"]) == 1
        assert _jwks["keys"][0]["kty"] == "EC"
        assert _jwks["keys"][0]["crv"] == "P-521"
        assert _jwks["keys"][0]["alg"] == "ES512"
        assert "d" not in _jwks["keys"][0]

    def test_trust_store_by_kind(self):
        assert isinstance(self.topology["TA-A"].store, SubordinateStore)
        assert isinstance(self.topology["IM-A"].store, SubordinateStore)
        assert self.topology["OP-A"].store is None

    def test_no_cycle(self):
        assert self.topology.find_cycle() == []

    def test_to_dict(self):
        _info = self.topology.to_dict()
        assert _info["TA-A"] == {
            "kind": "trust-anchor",
            "identifier": TA_ID,
            "superiors": [],
            "subordinates": ["OP-A", "IM-A"]
        }

    def test_str(self):
        assert str(self.topology["OP-A"]) == (
            "EntityNode{Superiors:['TA-A'], Subordinates:[], Name:OP-A, Kind:leaf, "
            "Identifier:https://op-a.example.com}")


class TestFullFederation(object):

    @pytest.fixture(autouse=True)
    def create_topology(self):
        self.conf = Configuration.create_from_config_file(full_path("federation.yaml"))
        self.topology = build(self.conf.entities, self.conf.edges)

    def test_one_node_per_referenced_name(self):
        _referenced = set()
        for edge in self.conf.edges:
            _referenced.update([edge.head, edge.tail])
        assert set(self.topology.keys()) == _referenced
        assert len(self.topology) <= len(self.conf.entities)

    def test_symmetry(self):
        for a in self.topology.values():
            for b in self.topology.values():
                assert (b.name in a.subordinates) == (a.name in b.superiors)

    def test_multiple_superiors(self):
        assert self.topology["IM-A"].superiors == ["TA-A", "TA-B"]
        assert self.topology["OP-B"].superiors == ["TA-B", "IM-A"]

    def test_distinct_identities(self):
        _keys = set()
        for node in self.topology.values():
            _jwks = public_jwks(node.keyjar, node.entity_id)
            _keys.add(_jwks["keys"][0]["x"])
        assert len(_keys) == len(self.topology)


def test_keys_generated_once(monkeypatch):
    _calls = []
    _orig = topology_module.new_signing_keys

    def counting(entity_id, key_defs=None, **kwargs):
        _calls.append(entity_id)
        return _orig(entity_id, key_defs, **kwargs)

    monkeypatch.setattr(topology_module, "new_signing_keys", counting)

    conf = Configuration.create_from_config_file(full_path("federation.yaml"))
    topology = build(conf.entities, conf.edges)
    assert sorted(_calls) == sorted(node.entity_id for node in topology.values())


def test_edge_order_does_not_change_graph():
    conf = Configuration.create_from_config_file(full_path("federation.yaml"))
    forward = build(conf.entities, conf.edges)
    backward = build(conf.entities, list(reversed(conf.edges)))
    assert set(forward.keys()) == set(backward.keys())
    for name, node in forward.items():
        assert set(node.superiors) == set(backward[name].superiors)
        assert set(node.subordinates) == set(backward[name].subordinates)


def test_repeated_edge_linked_once():
    _entities = entities(("TA", "trust-anchor", TA_ID), ("OP", "leaf", OP_ID))
    topology = build(_entities, [EdgeConfig("TA", "OP"), EdgeConfig("TA", "OP")])
    assert topology["TA"].subordinates == ["OP"]
    assert topology["OP"].superiors == ["TA"]


def test_isolated_entities_are_dropped():
    _entities = entities(("TA", "trust-anchor", TA_ID), ("OP", "leaf", OP_ID),
                         ("IM", "intermediate", IM_ID))
    topology = build(_entities, [EdgeConfig("TA", "OP")])
    assert set(topology.keys()) == {"TA", "OP"}


def test_cycle_is_accepted():
    _entities = entities(("A", "intermediate", "https://a.example.com"),
                         ("B", "intermediate", "https://b.example.com"),
                         ("C", "intermediate", "https://c.example.com"))
    topology = build(_entities, [EdgeConfig("A", "B"), EdgeConfig("B", "C"), EdgeConfig("C", "A")])
    assert topology["A"].superiors == ["C"]
    _cycle = topology.find_cycle()
    assert _cycle[0] == _cycle[-1]
    assert set(_cycle) == {"A", "B", "C"}


def test_undefined_reference():
    _entities = entities(("TA", "trust-anchor", TA_ID))
    with pytest.raises(ConfigError):
        build(_entities, [EdgeConfig("TA", "OP")])


@pytest.mark.parametrize("kind, identifier", [
    ("", TA_ID),
    ("root", TA_ID),
    ("trust-anchor", ""),
])
def test_invalid_entity(kind, identifier):
    _entities = entities(("TA", kind, identifier), ("OP", "leaf", OP_ID))
    with pytest.raises(ConfigError):
        build(_entities, [EdgeConfig("TA", "OP")])


def test_invalid_entity_not_referenced():
    # All declared entities are checked, referenced or not
    _entities = entities(("TA", "trust-anchor", TA_ID), ("OP", "leaf", OP_ID),
                         ("XX", "", "https://xx.example.com"))
    with pytest.raises(ConfigError):
        build(_entities, [EdgeConfig("TA", "OP")])


def test_invalid_identifier_not_referenced():
    _entities = entities(("TA", "trust-anchor", TA_ID), ("OP", "leaf", OP_ID),
                         ("XX", "leaf", "not a url"))
    with pytest.raises(ConfigError):
        build(_entities, [EdgeConfig("TA", "OP")])


@pytest.mark.parametrize("identifier", [
    "ta-a.example.com",
    "/just/a/path",
    "https://[::1",
])
def test_invalid_identifier(identifier):
    _entities = entities(("TA", "trust-anchor", identifier), ("OP", "leaf", OP_ID))
    with pytest.raises(ConfigError):
        build(_entities, [EdgeConfig("TA", "OP")])


def test_key_generation_failure(monkeypatch):
    def broken(entity_id, key_defs=None, **kwargs):
        raise ValueError("no entropy")

    monkeypatch.setattr(topology_module, "new_signing_keys", broken)

    _entities = entities(("TA", "trust-anchor", TA_ID), ("OP", "leaf", OP_ID))
    with pytest.raises(ConstructionError):
        build(_entities, [EdgeConfig("TA", "OP")])
