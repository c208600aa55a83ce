"""Reporter adapters that consume the execution event stream.

Implementations:
- text: Streaming text report with glyphs, tallies and failure diffs
"""
