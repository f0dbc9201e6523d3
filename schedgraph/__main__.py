"""Allow ``python -m schedgraph``."""

from schedgraph.cli import main

if __name__ == "__main__":
    main()
