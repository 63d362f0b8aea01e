"""file-quarantine - scheduled filesystem hygiene.

Quarantines matured files into a mirrored tree, truncates oversized
logs, and expires quarantined files past a retention window.
"""

__version__ = "0.3.0"
