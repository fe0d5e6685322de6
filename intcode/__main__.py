from __future__ import annotations

from intcode.cli import main

raise SystemExit(main())
