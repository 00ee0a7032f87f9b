"""Exceptions raised by the Calculator client."""


class CalculatorClientError(Exception):
    """Base class for every error surfaced by the client."""


class TransportError(CalculatorClientError):
    """The byte stream could not be opened, was closed, or timed out."""


class ProtocolError(CalculatorClientError):
    """A reply could not be decoded or does not match its request."""


class RemoteApplicationError(ProtocolError):
    """
    The peer answered with a Thrift application exception.

    This covers failures the service does not declare in its schema, such as
    an unknown method or an internal error on the remote side.

    :param int type_code: ``TApplicationException`` type code
    :param str message: Message sent by the peer
    """

    def __init__(self, type_code: int, message: str) -> None:
        super().__init__(f"remote application error {type_code}: {message}")
        self.type_code = type_code
        self.message = message


class InvalidOperation(CalculatorClientError):
    """
    Domain error declared by ``calculate``, e.g. a division by zero.

    It is decoded from a well-formed reply, so the connection stays usable.

    :param int what_op: Operation code the peer refused
    :param str why: Human-readable reason
    """

    def __init__(self, what_op: int, why: str) -> None:
        super().__init__(why)
        self.what_op = what_op
        self.why = why

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InvalidOperation):
            return NotImplemented
        return (self.what_op, self.why) == (other.what_op, other.why)

    def __hash__(self) -> int:
        return hash((self.what_op, self.why))

    def __repr__(self) -> str:
        return f"InvalidOperation(what_op={self.what_op!r}, why={self.why!r})"
