"""Entry point for ``python -m treedigest``."""

from treedigest.cli import main

raise SystemExit(main())
