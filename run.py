#!/usr/bin/env python3
"""Convenience runner for the tour map server.

Usage:
    python run.py
"""
from tour_map.main import main

if __name__ == "__main__":
    main()
