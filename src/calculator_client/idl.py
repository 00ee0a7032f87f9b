"""Thrift schema of the Calculator service, loaded at import time."""
from pathlib import Path

import thriftpy2

IDL_PATH: Path = Path(__file__).with_name("calculator.thrift")

# Module holding the generated structs (Work, SharedStruct, ...) and the
# Calculator service with its <method>_args / <method>_result classes
calculator_thrift = thriftpy2.load(str(IDL_PATH), module_name="calculator_thrift")
