from __future__ import annotations

from intcode.api import ExecutionResult, run_program
from intcode.arcade import Arcade, Draw, Joystick, Score, Screen, Tile
from intcode.chain import MachineChain, StageHalted, run_chain, search_seeds
from intcode.errors import (
    ImmediateWriteTarget,
    InputStarved,
    IntcodeError,
    InvalidAddress,
    InvalidOpcode,
    InvalidParameterMode,
    InvalidProgram,
    MachineHalted,
    StepLimitExceeded,
)
from intcode.machine import Machine, MachineState, StarvePolicy
from intcode.memory import Memory
from intcode.opcodes import Instruction, Opcode, ParamMode, decode, disassemble
from intcode.program import Program, load_program, parse_program

__all__ = [
    "__version__",
    # Machine
    "Machine",
    "MachineState",
    "StarvePolicy",
    "Memory",
    # Programs
    "Program",
    "parse_program",
    "load_program",
    # Decoding
    "Opcode",
    "ParamMode",
    "Instruction",
    "decode",
    "disassemble",
    # Batch runs
    "run_program",
    "ExecutionResult",
    # Chains
    "MachineChain",
    "run_chain",
    "StageHalted",
    "search_seeds",
    # Arcade
    "Arcade",
    "Screen",
    "Tile",
    "Joystick",
    "Draw",
    "Score",
    # Errors
    "IntcodeError",
    "InvalidProgram",
    "InvalidOpcode",
    "InvalidParameterMode",
    "InvalidAddress",
    "ImmediateWriteTarget",
    "InputStarved",
    "MachineHalted",
    "StepLimitExceeded",
]

__version__ = "0.1.0"
