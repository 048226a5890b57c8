"""
hashwatch CLI Package.

Entry point lives in cli.main.
Requires Python 3.11+.
"""
