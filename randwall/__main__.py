"""
__main__.py

This file adds support for running randwall as a python module instead of invoking the "randwall"
command line entrypoint:

    $ python -m randwall next
"""

from randwall.cli import main


if __name__ == "__main__":
    main()
