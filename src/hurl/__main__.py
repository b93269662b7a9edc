"""Allow ``python -m hurl``."""

from hurl.app import main

main()
