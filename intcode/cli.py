from __future__ import annotations

import argparse
import sys
from pathlib import Path

from intcode.arcade import Arcade, Tile
from intcode.chain import run_chain, search_seeds
from intcode.config import configure_logging, load_settings
from intcode.errors import IntcodeError
from intcode.machine import Machine, MachineState, StarvePolicy
from intcode.opcodes import disassemble
from intcode.program import load_program
from intcode.render import render_screen
from intcode.session import load_session, run_session
from intcode.trace import JsonlTracer

EXIT_PAUSED = 2


def _existing_path(value: str) -> Path:
    p = Path(value)
    if not p.exists():
        raise argparse.ArgumentTypeError(f"path not found: {value}")
    return p


def _session_path(value: str) -> Path:
    p = _existing_path(value)
    if p.suffix.lower() not in {".yml", ".yaml"}:
        raise argparse.ArgumentTypeError(f"session must be YAML: {value}")
    return p


def _patch(value: str) -> tuple[int, int]:
    address, sep, raw = value.partition("=")
    try:
        if not sep:
            raise ValueError(value)
        return int(address), int(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"patch must be ADDR=VALUE: {value}") from e


def _int_list(value: str) -> list[int]:
    try:
        return [int(v) for v in value.split(",") if v.strip()]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers: {value}") from e


def _print_outputs(values: list[int]) -> None:
    for v in values:
        print(v)


def _read_stdin_input() -> int | None:
    line = sys.stdin.readline()
    if not line:
        return None
    return int(line.strip())


def _cmd_run(args: argparse.Namespace, *, on_starve: StarvePolicy, max_steps: int | None) -> int:
    program = load_program(args.program).patched(dict(args.patch))
    tracer = None
    if args.trace is not None:
        tracer = JsonlTracer(args.trace)
        tracer.reset()
    machine = Machine(
        program,
        inputs=args.input,
        on_starve=StarvePolicy.PAUSE if args.interactive else on_starve,
        max_steps=max_steps,
        tracer=tracer,
    )

    while True:
        state = machine.run()
        _print_outputs(machine.drain_output())
        if state == MachineState.HALTED:
            break
        if not args.interactive:
            print(f"paused: awaiting input at {machine.ip}", file=sys.stderr)
            return EXIT_PAUSED
        value = _read_stdin_input()
        if value is None:
            print(f"paused: stdin closed while awaiting input at {machine.ip}", file=sys.stderr)
            return EXIT_PAUSED
        machine.push_input(value)

    if args.dump_memory:
        print(",".join(str(v) for v in machine.memory_snapshot()))
    return 0


def _cmd_session(args: argparse.Namespace, *, max_steps: int | None) -> int:
    spec = load_session(args.session)
    if spec.max_steps is None and max_steps is not None:
        spec = spec.model_copy(update={"max_steps": max_steps})
    result = run_session(spec)
    _print_outputs(result.output)
    if spec.dump_memory:
        print(",".join(str(v) for v in result.memory))
    if not result.halted:
        print("paused: awaiting input", file=sys.stderr)
        return EXIT_PAUSED
    return 0


def _cmd_chain(args: argparse.Namespace, *, max_steps: int | None) -> int:
    program = load_program(args.program)
    if args.search:
        signal, seeds = search_seeds(
            program, args.seeds, signal=args.signal, loopback=args.loopback, max_steps=max_steps
        )
        print(f"seeds: {','.join(str(s) for s in seeds)}")
    else:
        signal = run_chain(
            program, args.seeds, signal=args.signal, loopback=args.loopback, max_steps=max_steps
        )
    print(signal)
    return 0


def _cmd_arcade(args: argparse.Namespace, *, max_steps: int | None) -> int:
    arcade = Arcade(load_program(args.program), free_play=args.free_play, max_steps=max_steps)
    if args.autopilot:
        arcade.play(max_frames=args.max_frames)
    else:
        arcade.run()
    if args.show:
        sys.stdout.write(render_screen(arcade.screen))
    print(f"blocks: {arcade.screen.count(Tile.BLOCK)}")
    print(f"score: {arcade.screen.score}")
    return 0


def _cmd_disasm(args: argparse.Namespace) -> int:
    program = load_program(args.program)
    for address, text in disassemble(program.words):
        print(f"{address:>6}  {text}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="intcode")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    run_p = sub.add_parser("run", help="run a program and print its outputs")
    run_p.add_argument("program", type=_existing_path)
    run_p.add_argument("-i", "--input", type=int, action="append", default=[])
    run_p.add_argument("--patch", type=_patch, action="append", default=[], help="ADDR=VALUE")
    mode = run_p.add_mutually_exclusive_group()
    mode.add_argument("--batch", action="store_true", help="running out of input is fatal")
    mode.add_argument(
        "--interactive", action="store_true", help="read more input from stdin when paused"
    )
    run_p.add_argument("--max-steps", type=int, default=None)
    run_p.add_argument("--dump-memory", action="store_true")
    run_p.add_argument("--trace", type=Path, default=None, help="write a JSONL execution trace")

    session_p = sub.add_parser("session", help="run a YAML session file")
    session_p.add_argument("session", type=_session_path)

    chain_p = sub.add_parser("chain", help="run machines connected output-to-input")
    chain_p.add_argument("program", type=_existing_path)
    chain_p.add_argument("--seeds", type=_int_list, required=True, help="e.g. 0,1,2,3,4")
    chain_p.add_argument("--signal", type=int, default=0)
    chain_p.add_argument("--loopback", action="store_true")
    chain_p.add_argument("--search", action="store_true", help="try every ordering of the seeds")
    chain_p.add_argument("--max-steps", type=int, default=None)

    arcade_p = sub.add_parser("arcade", help="run the arcade cabinet headless")
    arcade_p.add_argument("program", type=_existing_path)
    arcade_p.add_argument("--free-play", action="store_true")
    arcade_p.add_argument("--autopilot", action="store_true")
    arcade_p.add_argument("--max-frames", type=int, default=None)
    arcade_p.add_argument("--max-steps", type=int, default=None)
    arcade_p.add_argument("--show", action="store_true", help="print the final screen")

    disasm_p = sub.add_parser("disasm", help="disassemble a program")
    disasm_p.add_argument("program", type=_existing_path)

    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as e:
        raise SystemExit(f"error: {e}") from e
    configure_logging("DEBUG" if args.verbose else settings.log_level)
    max_steps = getattr(args, "max_steps", None)
    if max_steps is None:
        max_steps = settings.max_steps

    try:
        if args.cmd == "run":
            on_starve = StarvePolicy.FAIL if args.batch else settings.on_starve
            return _cmd_run(args, on_starve=on_starve, max_steps=max_steps)
        if args.cmd == "session":
            return _cmd_session(args, max_steps=max_steps)
        if args.cmd == "chain":
            return _cmd_chain(args, max_steps=max_steps)
        if args.cmd == "arcade":
            return _cmd_arcade(args, max_steps=max_steps)
        if args.cmd == "disasm":
            return _cmd_disasm(args)
    except (IntcodeError, ValueError, OSError) as e:
        raise SystemExit(f"error: {e}") from e

    raise AssertionError(f"unhandled cmd: {args.cmd}")
