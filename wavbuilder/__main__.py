"""Allow running wavbuilder with ``python -m wavbuilder``."""

from wavbuilder.cli import main

raise SystemExit(main())
