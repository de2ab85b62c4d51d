"""
http/request.py - Capture the current request as a Werkzeug Request

Hosts running under a WSGI server pass their environ. CGI-style hosts and
console scripts capture from the process environment; anything missing is
filled with WSGI defaults, so a console capture is ``GET http://127.0.0.1/``.
"""

from __future__ import annotations
from typing import Any, Dict, Mapping, Optional
from wsgiref.handlers import read_environ
from wsgiref.util import setup_testing_defaults
import logging

from werkzeug.wrappers import Request

logger = logging.getLogger("http.request")


def capture_request(environ: Optional[Mapping[str, Any]] = None) -> Request:
    """
    Build a Request from a WSGI environ or from the process environment.

    Args:
        environ: WSGI environ of the current request (optional)

    Returns:
        werkzeug Request
    """
    if environ is None:
        env: Dict[str, Any] = dict(read_environ())
        env.setdefault("SERVER_NAME", "127.0.0.1")
        env.setdefault("HTTP_HOST", env["SERVER_NAME"])
    else:
        env = dict(environ)

    setup_testing_defaults(env)
    request = Request(env)
    logger.debug(f"Captured request {request.method} {request.url}")
    return request
