"""Allow ``python -m nodegroups``."""

from nodegroups.cli import main

if __name__ == "__main__":
    main()
