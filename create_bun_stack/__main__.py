"""Allow ``python -m create_bun_stack``."""

from create_bun_stack.cli import main

main()
