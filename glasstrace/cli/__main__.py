"""
GlassTrace CLI entry point.

Usage:
    python -m glasstrace.cli find <pattern> <text>
    python -m glasstrace.cli quantify forall true false true
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
