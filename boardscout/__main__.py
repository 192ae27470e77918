import sys

from boardscout.cli import main

sys.exit(main())
