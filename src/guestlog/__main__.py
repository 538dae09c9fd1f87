"""Allow running as `python -m guestlog`."""

from guestlog.server import main

main()
