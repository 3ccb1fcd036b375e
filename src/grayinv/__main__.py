import sys

from grayinv.cli import main

sys.exit(main())
