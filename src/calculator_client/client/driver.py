"""Fixed call sequence exercising every Calculator operation."""
import sys
from typing import TextIO

from calculator_client.client.stub import CalculatorClient
from calculator_client.common.logger import logger
from calculator_client.common.models import Operation, Work
from calculator_client.errors import InvalidOperation


def _calculate_and_print(client: CalculatorClient, logid: int, work: Work, out: TextIO) -> int:
    print(f"calculate({logid}, {{{work.op.name.lower()}, {work.num1}, {work.num2}}})", file=out)
    result = client.calculate(logid, work)
    print(f"{work.describe()} = {result}", file=out)
    return result


def run_session(client: CalculatorClient, out: TextIO = sys.stdout) -> None:
    """
    Call every operation once, in a fixed order, and print the outcomes.

    Steps:
        1. ping
        2. add(1, 1)
        3. calculate: subtract, then multiply
        4. getStruct(1), stored by the subtraction above
        5. calculate: divide, then divide by zero (the InvalidOperation is
           reported and the sequence goes on)
        6. zip (one-way)

    Transport and protocol errors are not caught here and end the session.

    :param CalculatorClient client: Stub over an open transport
    :param TextIO out: Where progress and results are printed
    """
    logger.info("🧮 Starting call sequence")

    print("ping()", file=out)
    client.ping()

    print("add(1, 1)", file=out)
    total = client.add(1, 1)
    print(f"1 + 1 = {total}", file=out)

    _calculate_and_print(client, 1, Work(num1=15, num2=10, op=Operation.SUBTRACT), out)
    _calculate_and_print(client, 2, Work(num1=15, num2=10, op=Operation.MULTIPLY), out)

    print("getStruct(1)", file=out)
    record = client.get_struct(1)
    print(f"Retrieved struct: key={record.key}, value={record.value}", file=out)

    _calculate_and_print(client, 3, Work(num1=15, num2=3, op=Operation.DIVIDE), out)

    try:
        _calculate_and_print(client, 4, Work(num1=15, num2=0, op=Operation.DIVIDE), out)
    except InvalidOperation as exc:
        logger.warning(f"🧮❌ calculate(4) refused: {exc.why}")
        print(f"Caught InvalidOperation: {exc.why}", file=out)

    print("zip()", file=out)
    client.zip()

    print("All tests completed successfully!", file=out)
    logger.info("🧮✅ Call sequence finished")
