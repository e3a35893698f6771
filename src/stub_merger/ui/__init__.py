"""Command-line surface for stub-merger."""
