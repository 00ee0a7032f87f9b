"""Socket transport to the Calculator service."""
from contextlib import contextmanager
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field
from thriftpy2.transport import TBufferedTransport, TSocket, TTransportException

from calculator_client.common.logger import logger
from calculator_client.errors import TransportError


class ConnectionSettings(BaseModel):
    """
    Where and how to reach the Calculator service.

    Timeouts are in milliseconds, as thriftpy2 expects them.
    """

    # Immutable so the address cannot change while a session is running
    model_config = ConfigDict(frozen=True)

    host: str = Field(default="localhost", min_length=1, description="Server host name or address")
    port: int = Field(default=9090, ge=1, le=65535, description="Server TCP port")
    socket_timeout: int = Field(default=3000, gt=0, description="Read/write timeout in ms")
    connect_timeout: Optional[int] = Field(default=None, gt=0, description="Connect timeout in ms")

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    def build_transport(self) -> TBufferedTransport:
        """
        Create an unopened buffered socket transport for these settings.

        :return: Transport to pass to ``open_transport`` or open manually
        :rtype: TBufferedTransport
        """
        sock = TSocket(
            self.host,
            self.port,
            socket_timeout=self.socket_timeout,
            connect_timeout=self.connect_timeout,
        )
        return TBufferedTransport(sock)


@contextmanager
def open_transport(
    settings: ConnectionSettings,
    transport: Optional[TBufferedTransport] = None,
) -> Iterator[TBufferedTransport]:
    """
    Open one connection for a whole session and close it exactly once.

    :param ConnectionSettings settings: Address and timeouts
    :param transport: Pre-built transport, built from ``settings`` when omitted

    :return: Context manager yielding the open transport
    :raises TransportError: If the connection cannot be established
    """
    if transport is None:
        transport = settings.build_transport()

    logger.info(f"🔌 Connecting to {settings.address}")
    try:
        transport.open()
    except (TTransportException, OSError) as exc:
        transport.close()
        logger.error(f"🔌❌ Could not connect to {settings.address}: {exc}")
        raise TransportError(f"could not connect to {settings.address}: {exc}") from exc

    try:
        yield transport
    finally:
        transport.close()
        logger.info(f"🔌 Connection to {settings.address} closed")
