import sys

from hctcalc.cli import main

sys.exit(main())
