import sys

from symbolsweep.cli import main

sys.exit(main())
