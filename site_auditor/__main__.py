# Allows the package to be run as a script using `python -m site_auditor`

from __future__ import annotations

import sys

from site_auditor.cli import main

if __name__ == "__main__":
    sys.exit(main())
