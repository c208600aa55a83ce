"""Style adapters for decorating report text.

- ansi: colorama ANSI colors for terminals
"""
