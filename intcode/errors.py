from __future__ import annotations


class IntcodeError(Exception):
    pass


class InvalidProgram(IntcodeError):
    def __init__(self, message: str, *, position: int | None = None) -> None:
        self.position = position
        prefix = ""
        if position is not None:
            prefix = f"item {position}: "
        super().__init__(prefix + str(message))


class InvalidOpcode(IntcodeError):
    def __init__(self, opcode: int, *, address: int) -> None:
        self.opcode = opcode
        self.address = address
        super().__init__(f"invalid opcode {opcode} at address {address}")


class InvalidParameterMode(IntcodeError):
    def __init__(self, mode: int, *, address: int) -> None:
        self.mode = mode
        self.address = address
        super().__init__(f"invalid parameter mode {mode} at address {address}")


class InvalidAddress(IntcodeError):
    def __init__(self, address: int, *, ip: int | None = None) -> None:
        self.address = address
        self.ip = ip
        suffix = f" (instruction at {ip})" if ip is not None else ""
        super().__init__(f"invalid address {address}{suffix}")


class ImmediateWriteTarget(IntcodeError):
    def __init__(self, *, address: int) -> None:
        self.address = address
        super().__init__(f"immediate mode write target at address {address}")


class InputStarved(IntcodeError):
    def __init__(self, *, address: int) -> None:
        self.address = address
        super().__init__(f"input requested with empty queue at address {address}")


class MachineHalted(IntcodeError):
    def __init__(self) -> None:
        super().__init__("machine is halted")


class StepLimitExceeded(IntcodeError):
    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"step limit of {limit} exceeded")
