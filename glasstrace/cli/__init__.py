# CLI package for GlassTrace
"""
Command-line interface for tracing single functions.

Commands:
    glasstrace find      — Trace a regex match back to its input
    glasstrace quantify  — Trace a forall/exists result back to its elements
"""
