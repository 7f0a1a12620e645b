"""Core components of the translation client.

This package contains the shared data container that wires the cache, the in-flight registry and
the translation services together.
"""

from core.shared_data import SharedData

__all__: list[str] = ["SharedData"]
