#!/usr/bin/env python3
"""
Runs a whole federation in one process.

Once running, use the Host header to talk to a specific entity, e.g.
curl http://localhost:8080/fetch?sub=https://im-a.example.com -H "Host: ta-a.example.com"
"""
import argparse
import json
import logging
import sys

from idpyoidc.logging import configure_logging
from werkzeug.serving import run_simple

from minifed.configure import Configuration
from minifed.exception import MinifedError
from minifed.utils import build_federation
from minifed.utils import make_dispatcher

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="minifed")
    parser.add_argument('-d', dest='display', action='store_true',
                        help="print the federation layout and exit")
    parser.add_argument('-v', dest='verbose', action='store_true')
    parser.add_argument('-p', dest='port', type=int)
    parser.add_argument('-b', dest='domain')
    parser.add_argument(dest="config")
    args = parser.parse_args(argv)

    try:
        config = Configuration.create_from_config_file(args.config)
    except MinifedError as err:
        sys.exit(f"minifed: {err}")

    configure_logging(debug=args.verbose, config=config.logging)

    try:
        topology = build_federation(config)
        dispatcher = make_dispatcher(topology)
    except MinifedError as err:
        logger.error(f"startup failed: {err}")
        sys.exit(f"minifed: {err}")

    if args.display:
        print(json.dumps(topology.to_dict(), indent=4, sort_keys=True))
        return

    _web_conf = config.webserver
    _domain = args.domain if args.domain is not None else _web_conf["domain"]
    _port = args.port or _web_conf["port"]

    # TODO: TLS, with certificates issued by a self-signed root, needs SNI when making requests.
    logger.info(f"listening on {_domain}:{_port}")
    run_simple(_domain, _port, dispatcher, threaded=True, use_debugger=_web_conf["debug"])


if __name__ == '__main__':
    main()
