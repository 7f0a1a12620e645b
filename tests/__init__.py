"""Unit tests for the translation client.

This package contains test modules for all components of the translation client.
"""
