"""
Core domain models, mathematical primitives, and invariants.

This module contains the foundational building blocks of the leverage lens
that are independent of rendering, networking and persistence.
"""
