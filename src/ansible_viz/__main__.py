"""Allow ``python -m ansible_viz``."""

from ansible_viz.cli import main

main()
