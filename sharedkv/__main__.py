"""Main entry point when executing sharedkv as a package.

This allows running the package using python -m sharedkv.
"""

from sharedkv.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
