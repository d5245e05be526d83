import sys

from src.ingest.cli import main

sys.exit(main())
