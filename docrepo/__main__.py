import sys

from docrepo.cli import main

sys.exit(main())
