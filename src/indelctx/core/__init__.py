"""
Core module for indelctx.

Provides the flank kernel for extending indels into their reference context.
"""

from .kernel import FlankKernel

__all__ = ["FlankKernel"]
