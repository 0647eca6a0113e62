import sys

from lastfm_top9.cli import main

sys.exit(main())
