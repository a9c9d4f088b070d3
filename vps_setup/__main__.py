import sys

from vps_setup.main import main

sys.exit(main())
