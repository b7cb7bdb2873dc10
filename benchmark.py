# Script entry point; the installed console script is `chainbench`

import sys
from chainbench.cli import main


if __name__ == "__main__":
    sys.exit(main())
