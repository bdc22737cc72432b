import sys

from imdb_ingest.cli import main

sys.exit(main())
