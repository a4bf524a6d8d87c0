"""
Code generation backends.
"""

from .base import CodeBackend
from .python_backend import PythonBackend

__all__ = ["CodeBackend", "PythonBackend"]
