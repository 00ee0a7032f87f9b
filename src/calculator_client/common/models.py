"""Pydantic models for the values exchanged with the Calculator service."""
from enum import IntEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from calculator_client.idl import calculator_thrift

# Operands travel as Thrift i32
I32_MIN: int = -(2**31)
I32_MAX: int = 2**31 - 1


class Operation(IntEnum):
    """Arithmetic operation performed by ``calculate``."""

    ADD = 1
    SUBTRACT = 2
    MULTIPLY = 3
    DIVIDE = 4


# Symbols used when reporting results
OPERATION_SYMBOLS: dict[Operation, str] = {
    Operation.ADD: "+",
    Operation.SUBTRACT: "-",
    Operation.MULTIPLY: "*",
    Operation.DIVIDE: "/",
}


class Work(BaseModel):
    """A unit of work sent to ``calculate``: two operands and an operation."""

    model_config = ConfigDict(frozen=True)

    num1: int = Field(default=0, ge=I32_MIN, le=I32_MAX, description="Left operand")
    num2: int = Field(..., ge=I32_MIN, le=I32_MAX, description="Right operand")
    op: Operation = Field(..., description="Operation applied to the operands")
    comment: Optional[str] = Field(default=None, description="Free-form note kept by the server")

    def to_thrift(self) -> Any:
        """
        Build the generated ``Work`` struct carried on the wire.

        :return: ``calculator_thrift.Work`` instance
        """
        return calculator_thrift.Work(
            num1=self.num1,
            num2=self.num2,
            op=int(self.op),
            comment=self.comment,
        )

    def describe(self) -> str:
        """Render the work as an infix expression, e.g. ``15 - 10``."""
        return f"{self.num1} {OPERATION_SYMBOLS[self.op]} {self.num2}"


class CalculationRecord(BaseModel):
    """A stored calculation returned by ``getStruct``."""

    model_config = ConfigDict(frozen=True)

    key: int = Field(..., description="Key the record is stored under")
    value: Optional[str] = Field(default=None, description="Stored value")

    @classmethod
    def from_thrift(cls, shared_struct: Any) -> "CalculationRecord":
        """
        Build a record from a decoded ``SharedStruct``.

        :param shared_struct: ``calculator_thrift.SharedStruct`` instance
        :return: Validated record
        :rtype: CalculationRecord
        """
        return cls(key=shared_struct.key, value=shared_struct.value)
