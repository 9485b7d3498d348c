import sys

from geocoin.cli import main

sys.exit(main())
