import logging
from typing import List
from typing import Optional

from cryptojwt import KeyJar
from cryptojwt.key_jar import build_keyjar

logger = logging.getLogger(__name__)

# The algorithm must align with the type of signing key.
DEFAULT_SIGN_ALG = "ES512"

DEFAULT_KEY_DEFS = [
    {"type": "EC", "crv": "P-521", "use": ["sig"]},
]


def new_signing_keys(entity_id: str,
                     key_defs: Optional[List[dict]] = None,
                     sign_alg: Optional[str] = DEFAULT_SIGN_ALG) -> KeyJar:
    """
    Create a fresh set of signing keys for an entity.

    The keys are stored both under the anonymous owner and under the entity's identifier
    so that they can be used for signing as well as exported as the entity's public keys.

    :param entity_id: The entity identifier
    :param key_defs: Key definitions, defaults to a single EC P-521 key
    :param sign_alg: The algorithm the signing keys are bound to
    :return: A KeyJar instance
    """
    _keyjar = build_keyjar(key_defs or DEFAULT_KEY_DEFS)
    # build_keyjar leaves alg unset. An EC key without alg only matches when the curve
    # name can be read from the algorithm, which ES512 with P-521 can not.
    for key in _keyjar.get_issuer_keys(""):
        if key.use in ("", "sig"):
            key.alg = sign_alg or DEFAULT_SIGN_ALG
    _keyjar.import_jwks(_keyjar.export_jwks(True), entity_id)
    logger.debug(f"generated signing keys for {entity_id}")
    return _keyjar


def public_jwks(keyjar: KeyJar, entity_id: str) -> dict:
    return keyjar.export_jwks(False, entity_id)
