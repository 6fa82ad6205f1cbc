import sys

from pixbatch.cli import main

sys.exit(main())
