"""
http/ - Request capture
"""

from .request import capture_request

__all__ = ["capture_request"]
