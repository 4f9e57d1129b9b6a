import sys

from spa_prerender.cli import main

sys.exit(main())
