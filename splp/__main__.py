import sys

from splp.cli import main

sys.exit(main())
