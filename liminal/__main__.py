"""Main module.

This module belongs to `liminal` in the liminal codebase.
"""

from liminal.launch import main


if __name__ == "__main__":
    raise SystemExit(main())
