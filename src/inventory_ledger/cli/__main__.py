"""
Allow running ledgerctl as a module: python -m inventory_ledger.cli
"""

import sys
from .ledgerctl import main

if __name__ == "__main__":
    sys.exit(main())
