import sys

from typstfmt.cli import main

sys.exit(main())
