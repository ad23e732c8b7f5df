import sys

from responsive_bg.cli import main

if __name__ == "__main__":
    sys.exit(main())
