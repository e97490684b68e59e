class SessionError(Exception):
    """Base class for errors raised by the session protocol."""


class DecodeError(SessionError):
    """Payload could not be parsed into a structured record."""


class ValidationError(SessionError):
    """Payload parsed but one or more required fields are absent."""

    def __init__(self, kind: str, missing):
        self.kind = kind
        self.missing = list(missing)
        super().__init__(f"Missing {kind} data: {', '.join(self.missing)}")


class DuplicateError(SessionError):
    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__(f"Player already exists with ID: {connection_id}")


class NotFoundError(SessionError):
    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__(f"No player registered with ID: {connection_id}")


class NotJoinedError(SessionError):
    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__("Join the session before sending state changes")


class ConnectionClosedError(SessionError):
    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__("This connection has left the session")
