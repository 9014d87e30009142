"""
keyload
=======
Bulk loader that seeds or restores a keyserver's keyring from local key
files, outside of the normal reconciliation path.

Provides:
- Glob-based key file resolution and a streaming key record decoder
- Batched inserts into a pluggable keyring storage (SQLite default)
- SIGUSR2-driven CPU and memory profiling for long loads
"""

__version__ = "0.1.0"
