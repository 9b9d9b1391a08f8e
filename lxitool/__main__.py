import sys

from lxitool.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
