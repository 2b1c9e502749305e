import sys

from headergen.cli import main

sys.exit(main())
