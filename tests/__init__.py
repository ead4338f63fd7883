import os

from cryptojwt import JWT
from cryptojwt import KeyJar

BASE_PATH = os.path.abspath(os.path.dirname(__file__))

TA_ID = "https://ta-a.example.com"
IM_ID = "https://im-a.example.com"
OP_ID = "https://op-a.example.com"

# The smallest interesting federation
SMALL_FEDERATION = {
    "entities": {
        "TA-A": {"kind": "trust-anchor", "identifier": TA_ID},
        "IM-A": {"kind": "intermediate", "identifier": IM_ID},
        "OP-A": {"kind": "leaf", "identifier": OP_ID},
    },
    "edges": [
        "TA-A -> OP-A",
        "TA-A -> IM-A"
    ]
}


def full_path(local_file):
    return os.path.join(BASE_PATH, local_file)


def unpack_statement(jws: str, jwks: dict, issuer: str):
    """Verify the signature of a statement using the issuer's public keys."""
    keyjar = KeyJar()
    keyjar.import_jwks(jwks, issuer)
    return JWT(key_jar=keyjar).unpack(jws)
