"""Shared fakes: an in-memory transport and helpers to encode/decode envelopes."""
from io import BytesIO
from typing import Any, Callable, List, Tuple

import pytest
from thriftpy2.protocol.binary import TBinaryProtocol
from thriftpy2.thrift import TApplicationException, TMessageType
from thriftpy2.transport import TTransportException

from calculator_client.common.logger import logger
from calculator_client.idl import calculator_thrift

Calculator = calculator_thrift.Calculator


class FakeTransport:
    """Transport double: replays canned bytes and records what is written."""

    def __init__(self, incoming: bytes = b""):
        self._incoming = BytesIO(incoming)
        self._outgoing = BytesIO()
        self.reads = 0
        self.flushes = 0
        self.fail_on_flush = False
        self.closed = False

    def is_open(self) -> bool:
        return not self.closed

    def close(self) -> None:
        self.closed = True

    def read(self, sz: int) -> bytes:
        self.reads += 1
        chunk = self._incoming.read(sz)
        if len(chunk) < sz:
            raise TTransportException(
                type=TTransportException.END_OF_FILE,
                message="End of file reading from transport",
            )
        return chunk

    def write(self, buf: bytes) -> None:
        self._outgoing.write(buf)

    def flush(self) -> None:
        if self.fail_on_flush:
            raise OSError("Broken pipe")
        self.flushes += 1

    def sent(self) -> bytes:
        return self._outgoing.getvalue()


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers installed by setup_logging, they hold captured streams."""
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def _encode(method: str, message_type: int, seqid: int, payload: Any) -> bytes:
    out = FakeTransport()
    proto = TBinaryProtocol(out)
    proto.write_message_begin(method, message_type, seqid)
    proto.write_struct(payload)
    proto.write_message_end()
    return out.sent()


@pytest.fixture
def encode_reply() -> Callable[..., bytes]:
    """Build the bytes of a REPLY envelope for ``method``."""

    def _encode_reply(method: str, seqid: int, **fields: Any) -> bytes:
        result = getattr(Calculator, f"{method}_result")(**fields)
        return _encode(method, TMessageType.REPLY, seqid, result)

    return _encode_reply


@pytest.fixture
def encode_app_exception() -> Callable[..., bytes]:
    """Build the bytes of an EXCEPTION envelope for ``method``."""

    def _encode_app_exception(method: str, seqid: int, type_code: int, message: str) -> bytes:
        error = TApplicationException(type=type_code, message=message)
        return _encode(method, TMessageType.EXCEPTION, seqid, error)

    return _encode_app_exception


@pytest.fixture
def decode_requests() -> Callable[[bytes], List[Tuple[str, int, int, Any]]]:
    """Split the bytes written by a client into (method, type, seqid, args)."""

    def _decode_requests(data: bytes) -> List[Tuple[str, int, int, Any]]:
        source = FakeTransport(data)
        proto = TBinaryProtocol(source)
        requests = []
        remaining = len(data)
        while remaining:
            method, message_type, seqid = proto.read_message_begin()
            args = getattr(Calculator, f"{method}_args")()
            proto.read_struct(args)
            proto.read_message_end()
            requests.append((method, message_type, seqid, args))
            remaining = len(data) - source._incoming.tell()
        return requests

    return _decode_requests
