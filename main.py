#!/usr/bin/env python3
"""
Craps Ruin Simulator - Main Entry Point

Plays pass/come with maximum odds until the bankroll runs out, many times
over, and prints quantiles of session length and peak bankroll.
"""
import sys

from crapsruin.cli import main


if __name__ == "__main__":
    sys.exit(main())
