"""
macdevice module entrypoint

Allows running the device report directly via:
    python -m macdevice
"""

import sys

from macdevice.cli import main


if __name__ == "__main__":
    sys.exit(main())
