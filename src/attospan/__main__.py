"""Allow ``python -m attospan``."""

from attospan._cli import main

main()
