import sys

from spo_admin.cli import main

if __name__ == "__main__":
    sys.exit(main())
