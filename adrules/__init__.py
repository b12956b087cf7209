# adrules/__init__.py
"""
AdRules package initializer.
Defines the package version; the CLI lives in :mod:`adrules.cli`.
"""
__version__ = "0.1.0"
