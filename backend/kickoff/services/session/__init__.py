from .errors import (
    ConnectionClosedError,
    DecodeError,
    DuplicateError,
    NotFoundError,
    NotJoinedError,
    SessionError,
    ValidationError,
)
from .registry import Registry
from .router import EventRouter, Transport

__all__ = [
    'ConnectionClosedError',
    'DecodeError',
    'DuplicateError',
    'EventRouter',
    'NotFoundError',
    'NotJoinedError',
    'Registry',
    'SessionError',
    'Transport',
    'ValidationError',
]
