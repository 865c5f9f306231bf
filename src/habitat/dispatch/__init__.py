"""Request dispatch: tags, payload validation and the response envelope."""

from .dispatcher import Dispatcher, to_wire
from .requests import Request, RequestType

__all__ = ["Dispatcher", "Request", "RequestType", "to_wire"]
