from __future__ import annotations

import sys

from cdc_record_transform.app import run


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
