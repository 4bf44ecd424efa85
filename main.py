#!/usr/bin/env python3
"""
Genetic Circle Packing

Main entry point for the packing engine. Runs one optimization from a YAML
configuration file and prints the result.

Usage:
    python main.py config.yaml [--seed N] [--workers N] [--log-level LEVEL] [--report]
"""

import sys
from pathlib import Path

# Add current directory to path for imports
sys.path.append(str(Path(__file__).parent))

from ga_engine.cli import main


if __name__ == "__main__":
    sys.exit(main())
