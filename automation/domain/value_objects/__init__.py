"""Domain value objects (immutable, no identity)."""

from automation.domain.value_objects.core import ActionDescriptor

__all__ = ["ActionDescriptor"]
