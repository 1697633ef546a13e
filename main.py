#!/usr/bin/env python3
"""
PR Comment Rate Analyzer

Main entry point for the PR comment rate analyzer.
"""

from comment_rate.cli import main

if __name__ == '__main__':
    main()
