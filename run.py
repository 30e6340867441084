#!/usr/bin/env python3
"""
run.py - Main entry point for the connect-N terminal game

Examples:
    python run.py play --columns 7 --rows 6 --count 4 --animate
    python run.py replay --moves 3,2,3,2,3,2,3
    python run.py check --columns 3 --rows 3 --count 3 --position 1,0,0,0,1,0,0,0,1
"""

import sys

from connectn.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
