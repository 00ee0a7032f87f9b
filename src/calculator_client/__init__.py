"""Typed Thrift client for the tutorial Calculator service."""
from calculator_client.client.stub import CalculatorClient
from calculator_client.client.transport import ConnectionSettings, open_transport
from calculator_client.common.models import CalculationRecord, Operation, Work
from calculator_client.errors import (
    CalculatorClientError,
    InvalidOperation,
    ProtocolError,
    RemoteApplicationError,
    TransportError,
)

__all__ = [
    "CalculationRecord",
    "CalculatorClient",
    "CalculatorClientError",
    "ConnectionSettings",
    "InvalidOperation",
    "Operation",
    "ProtocolError",
    "RemoteApplicationError",
    "TransportError",
    "Work",
    "open_transport",
]
