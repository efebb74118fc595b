import sys

from country_filter.cli import main


if __name__ == "__main__":
    sys.exit(main())
