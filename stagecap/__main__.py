import sys

from stagecap.main import main

sys.exit(main())
