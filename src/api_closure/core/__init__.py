"""
Core Package.

Contains the closure computation proper:
- Descriptors exchanged with providers
- The IntrospectionProvider protocol
- The worklist ClosureEngine
- Error types
"""

from api_closure.core.descriptors import MemberDescriptor, NamespaceDescriptor, TypeDescriptor
from api_closure.core.engine import ClosureEngine
from api_closure.core.errors import ClosureError, TypeNotFoundError
from api_closure.core.provider import IntrospectionProvider

__all__ = [
  "ClosureEngine",
  "ClosureError",
  "IntrospectionProvider",
  "MemberDescriptor",
  "NamespaceDescriptor",
  "TypeDescriptor",
  "TypeNotFoundError",
]
