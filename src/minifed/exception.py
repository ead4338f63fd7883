class MinifedError(Exception):
    pass


class ConfigError(MinifedError):
    pass


class ConstructionError(MinifedError):
    pass


class TrustWriteError(MinifedError):
    pass


# Errors raised while serving. They are turned into OpenID Federation error responses.

class RequestError(MinifedError):
    error = "invalid_request"
    status_code = 400


class InvalidRequest(RequestError):
    pass


class UnsupportedParameter(RequestError):
    error = "unsupported_parameter"


class UnknownEntity(RequestError):
    error = "not_found"
    status_code = 404


class TemporarilyUnavailable(RequestError):
    error = "temporarily_unavailable"
    status_code = 503
