"""
ZQC Command-Line Interface
==========================

This package provides command-line tools for the ZQC front end:

- **zqclex**: tokenize a source file into a token XML file
- **zqcparse**: parse a source or token XML file into an AST XML file

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["zqclex", "zqcparse"]
