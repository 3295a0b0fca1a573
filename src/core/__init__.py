"""
Core numeric primitives, value objects and serialized contracts.

This module contains the foundational building blocks that the generic math
engine dispatches over.
"""
