#!/usr/bin/env python3
"""
Flare Nodes - Main entry point.

This is a thin wrapper around the CLI.

Usage:
    python main.py --help
    python main.py describe
    python main.py run priceFeeds getCurrentPrices -p symbols=FLR,SGB
"""

from src.flare_nodes.cli.main import main

if __name__ == "__main__":
    main()
