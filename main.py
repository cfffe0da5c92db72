"""
Run a CHIP-8 ROM: python main.py ROM [key=value ...]
"""

import sys

from chip8vm.cli import main

if __name__ == "__main__":
    sys.exit(main())
