"""Allow ``python -m pages_cleanup``."""

import sys

from pages_cleanup.main import main

sys.exit(main())
