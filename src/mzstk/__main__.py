import sys

from mzstk.cli import main

sys.exit(main())
