"""Allow ``python -m xpipe``."""

from xpipe.cli.main import main

main()
