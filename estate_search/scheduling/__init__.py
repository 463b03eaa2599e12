"""Scheduling module for deferred (debounced) search submission."""

from .debouncer import Debouncer

__all__ = ['Debouncer']
