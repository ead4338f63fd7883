import logging

from cryptojwt.jwt import JWT
from cryptojwt.jwt import utc_time_sans_frac

from minifed.keys import DEFAULT_SIGN_ALG
from minifed.keys import public_jwks

logger = logging.getLogger(__name__)


def statement_claims(iss, sub, key_jar, metadata=None, metadata_policy=None,
                     authority_hints=None, constraints=None, jwks=None, **kwargs):
    msg = {'iss': iss, 'sub': sub}
    if metadata:
        msg['metadata'] = metadata

    if metadata_policy:
        msg['metadata_policy'] = metadata_policy

    if authority_hints:
        msg['authority_hints'] = authority_hints

    if constraints:
        msg['constraints'] = constraints

    if kwargs:
        msg.update(kwargs)

    # The public signing keys of the subject
    if jwks:
        msg['jwks'] = jwks
    else:
        msg['jwks'] = public_jwks(key_jar, sub)

    return msg


def create_entity_statement(iss, sub, key_jar, lifetime=86400, sign_alg=DEFAULT_SIGN_ALG,
                            **kwargs):
    """

    :param iss: The issuer of the signed JSON Web Token
    :param sub: The subject which the statement describes
    :param key_jar: A KeyJar instance holding the issuer's signing keys
    :param lifetime: The life time of the signed JWT.
    :param sign_alg: Signing algorithm
    :param kwargs: Claims passed on to :py:func:`statement_claims`. If `jwks` is not among
        them the subject's keys are read from the key jar.
    :return: A signed JSON Web Token
    """
    msg = statement_claims(iss, sub, key_jar, **kwargs)
    # The packer adds these
    del msg['iss']

    packer = JWT(key_jar=key_jar, iss=iss, lifetime=lifetime, sign_alg=sign_alg)
    return packer.pack(payload=msg)


def unsigned_entity_statement(iss, sub, key_jar, lifetime=86400, **kwargs) -> dict:
    msg = statement_claims(iss, sub, key_jar, **kwargs)
    msg['iat'] = utc_time_sans_frac()
    msg['exp'] = msg['iat'] + lifetime
    return msg
