from __future__ import annotations

from taskwright.runner.main import main

if __name__ == "__main__":
    raise SystemExit(main())
