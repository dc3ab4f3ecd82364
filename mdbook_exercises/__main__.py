import sys

from mdbook_exercises.main import main

sys.exit(main())
