"""Allow ``python -m chainload``."""

from chainload.cli import main

if __name__ == "__main__":
    main()
