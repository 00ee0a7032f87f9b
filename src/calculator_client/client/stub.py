"""Typed client stub for the Calculator service."""
from contextlib import contextmanager
import struct
from typing import Any, Callable, Iterator, Optional

from pydantic import BaseModel, ConfigDict, ValidationError
from thriftpy2.protocol.binary import TBinaryProtocol
from thriftpy2.protocol.exc import TProtocolException
from thriftpy2.thrift import TApplicationException, TMessageType
from thriftpy2.transport import TTransportException

from calculator_client.common.logger import logger
from calculator_client.common.models import CalculationRecord, Work
from calculator_client.errors import (
    InvalidOperation,
    ProtocolError,
    RemoteApplicationError,
    TransportError,
)
from calculator_client.idl import calculator_thrift

try:
    # Raised by thriftpy2's Cython binary codec instead of TProtocolException
    from thriftpy2.protocol.cybin.cybin import ProtocolError as CyProtocolError
except ImportError:
    CyProtocolError = TProtocolException

Calculator = calculator_thrift.Calculator

# Decoding failures of the pure-Python and Cython codecs
DECODE_ERRORS = (TProtocolException, CyProtocolError, struct.error)

# Sequence id carried by one-way requests, which never get a reply
ONEWAY_SEQID: int = 0


class Reply(BaseModel):
    """
    Decoded outcome of a two-way call: either a value or a domain error.

    Transport and protocol faults never end up here, they are raised.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any = None
    error: Optional[InvalidOperation] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """
        Return the value, or raise the domain error carried by the reply.

        :raises InvalidOperation: If the peer refused the operation
        """
        if self.error is not None:
            raise self.error
        return self.value


class CalculatorClient:
    """
    Client stub exposing one method per Calculator operation.

    Two-way calls go through ``_send_awaiting_reply``: they get the next
    sequence id of the connection and block until the matching reply is
    decoded. ``zip`` goes through ``_send_fire_and_forget``, which writes the
    request and returns without reading anything.

    The stub does not own the transport; open and close it around the
    session (see ``open_transport``).
    """

    def __init__(
        self,
        transport: Any,
        protocol_factory: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        """
        :param transport: Open thriftpy2 transport (is_open/read/write/flush)
        :param protocol_factory: Builds the codec on top of the transport,
            strict ``TBinaryProtocol`` by default
        """
        self._transport = transport
        factory = protocol_factory or TBinaryProtocol
        self._protocol = factory(transport)
        self._seqid: int = 0

    @property
    def sequence_id(self) -> int:
        """Last sequence id assigned to a two-way call, 0 before the first one."""
        return self._seqid

    # Service operations

    def ping(self) -> None:
        """Round trip with no arguments and no result."""
        self._send_awaiting_reply("ping").unwrap()

    def add(self, num1: int, num2: int) -> int:
        """
        Add two integers remotely.

        :param int num1: Left operand
        :param int num2: Right operand

        :return: Sum computed by the server
        :rtype: int
        """
        return self._send_awaiting_reply("add", num1=num1, num2=num2).unwrap()

    def calculate(self, logid: int, work: Work) -> int:
        """
        Run ``work`` remotely and log it under ``logid``.

        :param int logid: Key the server stores the calculation under
        :param Work work: Operands and operation

        :return: Result computed by the server
        :rtype: int
        :raises InvalidOperation: If the server refuses the operation,
            e.g. a division by zero
        """
        return self.try_calculate(logid, work).unwrap()

    def try_calculate(self, logid: int, work: Work) -> Reply:
        """Same round trip as ``calculate``, returning the tagged reply."""
        return self._send_awaiting_reply("calculate", logid=logid, w=work.to_thrift())

    def get_struct(self, key: int) -> CalculationRecord:
        """
        Fetch a record stored by a previous ``calculate``.

        :param int key: Log id used when the calculation was made

        :return: Stored record
        :rtype: CalculationRecord
        """
        shared_struct = self._send_awaiting_reply("getStruct", key=key).unwrap()
        try:
            return CalculationRecord.from_thrift(shared_struct)
        except ValidationError as exc:
            raise ProtocolError(f"getStruct returned an invalid record: {exc}") from exc

    def zip(self) -> None:
        """One-way call: nothing is read back, success is not observable."""
        self._send_fire_and_forget("zip")

    # Send primitives

    def _send_awaiting_reply(self, method: str, **args: Any) -> Reply:
        """
        Send a request and block until its reply is decoded.

        :param str method: Remote method name
        :param args: Fields of ``<method>_args``

        :return: Decoded reply
        :rtype: Reply
        :raises TransportError: If the stream fails during the call
        :raises ProtocolError: If the reply cannot be decoded or does not match
        """
        result_cls = getattr(Calculator, f"{method}_result")
        if getattr(result_cls, "oneway", False):
            raise ValueError(f"{method} is one-way and never replies")

        self._seqid += 1
        seqid = self._seqid
        logger.debug(f"📤 {method} seqid={seqid}")

        with self._translate_errors(method):
            self._write_request(method, TMessageType.CALL, seqid, args)
            result = self._read_reply(method, seqid, result_cls)

        reply = self._decode_result(method, result)
        logger.debug(f"📥 {method} seqid={seqid} ok={reply.ok}")
        return reply

    def _send_fire_and_forget(self, method: str, **args: Any) -> None:
        """
        Send a one-way request and return as soon as it is flushed.

        :param str method: Remote method name
        :param args: Fields of ``<method>_args``

        :raises TransportError: If the request cannot be written
        """
        logger.debug(f"📤 {method} oneway")
        with self._translate_errors(method):
            self._write_request(method, TMessageType.ONEWAY, ONEWAY_SEQID, args)

    # Envelope handling

    def _write_request(self, method: str, message_type: int, seqid: int, args: dict) -> None:
        # thriftpy2 sockets assert instead of raising once closed
        if not self._transport.is_open():
            raise TransportError(f"{method}: transport is closed")
        args_struct = getattr(Calculator, f"{method}_args")(**args)
        self._protocol.write_message_begin(method, message_type, seqid)
        self._protocol.write_struct(args_struct)
        self._protocol.write_message_end()
        self._transport.flush()

    def _read_reply(self, method: str, seqid: int, result_cls: type) -> Any:
        """
        Read one reply envelope and check it answers ``method``/``seqid``.

        :return: Decoded ``<method>_result`` struct
        :raises RemoteApplicationError: If the peer sent an application exception
        :raises ProtocolError: If the envelope does not match the request
        """
        name, message_type, reply_seqid = self._protocol.read_message_begin()

        if message_type not in (TMessageType.REPLY, TMessageType.EXCEPTION):
            raise ProtocolError(f"{method}: unexpected message type {message_type}")
        if name != method:
            raise ProtocolError(f"{method}: reply is for {name!r}")
        if reply_seqid != seqid:
            raise ProtocolError(f"{method}: expected seqid {seqid}, got {reply_seqid}")

        if message_type == TMessageType.EXCEPTION:
            app_error = TApplicationException()
            self._protocol.read_struct(app_error)
            self._protocol.read_message_end()
            logger.error(f"📥❌ {method} failed remotely: {app_error.message}")
            raise RemoteApplicationError(app_error.type, app_error.message or "")

        result = result_cls()
        self._protocol.read_struct(result)
        self._protocol.read_message_end()
        return result

    def _decode_result(self, method: str, result: Any) -> Reply:
        """
        Turn a ``<method>_result`` union into a ``Reply``.

        Field 0 holds the return value, the other fields the declared exceptions.
        """
        for field_id, field_spec in result.thrift_spec.items():
            if field_id == 0:
                continue
            raised = getattr(result, field_spec[1], None)
            if raised is not None:
                return Reply(error=self._map_declared_exception(method, raised))

        # void method
        if 0 not in result.thrift_spec:
            return Reply()

        if result.success is None:
            raise ProtocolError(f"{method}: reply carries neither a result nor an exception")
        return Reply(value=result.success)

    @staticmethod
    def _map_declared_exception(method: str, raised: Any) -> InvalidOperation:
        if isinstance(raised, calculator_thrift.InvalidOperation):
            return InvalidOperation(what_op=raised.whatOp, why=raised.why or "")
        raise ProtocolError(f"{method}: undeclared exception {type(raised).__name__}")

    @contextmanager
    def _translate_errors(self, method: str) -> Iterator[None]:
        try:
            yield
        except (TTransportException, OSError) as exc:
            logger.error(f"🔌❌ {method}: transport failure: {exc}")
            raise TransportError(f"{method}: {exc}") from exc
        except DECODE_ERRORS as exc:
            logger.error(f"📥❌ {method}: cannot decode reply: {exc}")
            raise ProtocolError(f"{method}: {exc}") from exc
