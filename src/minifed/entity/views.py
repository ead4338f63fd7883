import logging

from flask import request
from flask.helpers import make_response
from idpyoidc.message.oauth2 import ResponseMessage

from minifed.exception import RequestError

logger = logging.getLogger(__name__)


def error_response(error: str, error_description: str, status_code: int):
    err_msg = ResponseMessage(error=error, error_description=error_description)
    resp = make_response(err_msg.to_json(), status_code)
    resp.headers['Content-Type'] = 'application/json'
    return resp


def service_endpoint(endpoint):
    logger.info(f'At the "{endpoint.name}" endpoint')

    if request.args:
        _req_args = request.args.to_dict()
    else:
        _req_args = {}

    try:
        req_args = endpoint.parse_request(_req_args)
        logger.debug(f'request: {req_args}')
        args = endpoint.process_request(req_args)
    except RequestError as err:
        logger.info(f'{endpoint.name}: {err.error}: {err}')
        return error_response(err.error, str(err), err.status_code)

    resp = make_response(args['response'], 200)
    resp.headers['Content-Type'] = endpoint.response_content_type
    return resp
