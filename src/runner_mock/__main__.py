import sys

from runner_mock.cli import main

sys.exit(main())
