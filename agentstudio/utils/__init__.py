# file: agentstudio/agentstudio/utils/__init__.py
"""
Small shared helpers used across the agentstudio packages.
"""
from .id_generator import IdGenerator

__all__ = [
    "IdGenerator",
]
