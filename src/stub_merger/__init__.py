"""
stub-merger — package root

File: src/stub_merger/__init__.py

Purpose
- Catalog source units per namespace and classify each one as a stub
  (work-in-progress placeholder) or an implemented definition, so a merge step
  can reconcile generated stubs with hand-written code.

Import boundary rules
- No side effects at import time (no config loading, no logging init).
- Heavy submodules (CLI, config) are imported lazily by their callers.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
