from __future__ import annotations

import argparse
import json
from pathlib import Path

from intcode.trace import JsonlTracer, summarize_trace


def main() -> None:
    p = argparse.ArgumentParser(description="Summarize JSONL traces written by `intcode run --trace`.")
    p.add_argument("trace", nargs="+", type=Path)
    p.add_argument("--json", action="store_true", help="print JSON instead of text")
    args = p.parse_args()

    summaries = {}
    for path in args.trace:
        if not path.exists():
            raise SystemExit(f"missing trace: {path}")
        summaries[str(path)] = summarize_trace(JsonlTracer(path).iter_events())

    if args.json:
        print(json.dumps(summaries, indent=2))
        return

    for path, s in summaries.items():
        hot = ",".join(str(ip) for ip in s["hot_ips"]) or "n/a"
        print(f"{path}: steps={s['steps']} max_rb={s['max_relative_base']} hot_ips={hot}")
        for opcode, count in s["opcodes"].items():
            print(f"  - {opcode}: {count}")


if __name__ == "__main__":
    main()
