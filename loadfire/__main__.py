import sys

from loadfire.cli import main

sys.exit(main())
