import sys

from ztgfx.cli import main

sys.exit(main())
