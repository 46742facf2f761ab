import sys

from stepsched.main import main

sys.exit(main())
