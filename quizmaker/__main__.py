import sys

from quizmaker.main import main

sys.exit(main())
