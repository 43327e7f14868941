import sys

from ebay_atom.main import main

if __name__ == "__main__":
    sys.exit(main())
