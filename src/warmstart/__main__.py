# SPDX-License-Identifier: MIT
"""Allow ``python -m warmstart``."""

from .cli.main import main

raise SystemExit(main())
