""" Classes describing the information exchanged within and by the harness entities."""

from idpyoidc.exception import MissingRequiredAttribute
from idpyoidc.message import Message
from idpyoidc.message import REQUIRED_LIST_OF_STRINGS
from idpyoidc.message import SINGLE_OPTIONAL_STRING
from idpyoidc.message import SINGLE_REQUIRED_STRING
from idpyoidc.message.oidc import dict_deser
from idpyoidc.message.oidc import msg_ser_json

SINGLE_REQUIRED_DICT = (dict, True, msg_ser_json, dict_deser, False)

STATUS_ACTIVE = "active"
STATUS_BLOCKED = "blocked"
STATUS_PENDING = "pending"
STATUS_INACTIVE = "inactive"

SUBORDINATE_STATUS = [STATUS_ACTIVE, STATUS_BLOCKED, STATUS_PENDING, STATUS_INACTIVE]


class SubordinateInfo(Message):
    """What a superior knows about one of its immediate subordinates."""
    c_param = {
        "entity_id": SINGLE_REQUIRED_STRING,
        "jwks": SINGLE_REQUIRED_DICT,
        "entity_types": REQUIRED_LIST_OF_STRINGS,
        "status": SINGLE_REQUIRED_STRING
    }

    def verify(self, **kwargs):
        super(SubordinateInfo, self).verify(**kwargs)

        if self["status"] not in SUBORDINATE_STATUS:
            raise ValueError(f"Unknown subordinate status: {self['status']}")

        if not self["jwks"].get("keys"):
            raise ValueError("A subordinate must have at least one public key")

        return True


class FetchRequest(Message):
    c_param = {
        "sub": SINGLE_REQUIRED_STRING,
        "iss": SINGLE_OPTIONAL_STRING
    }


class ListRequest(Message):
    c_param = {
        "entity_type": SINGLE_OPTIONAL_STRING
    }


class ResolveRequest(Message):
    c_param = {
        "sub": SINGLE_REQUIRED_STRING,
        "trust_anchor": SINGLE_OPTIONAL_STRING,
        # Name used by earlier drafts
        "anchor": SINGLE_OPTIONAL_STRING,
        "entity_type": SINGLE_OPTIONAL_STRING
    }

    def verify(self, **kwargs):
        super(ResolveRequest, self).verify(**kwargs)

        if "trust_anchor" not in self and "anchor" not in self:
            raise MissingRequiredAttribute("trust_anchor")

        return True
