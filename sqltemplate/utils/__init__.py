"""Utility functions and classes for sqltemplate."""

from sqltemplate.utils import logging, serializers, type_guards

__all__ = ("logging", "serializers", "type_guards")
