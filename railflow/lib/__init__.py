"""Interoperability helpers.

- `nx`: conversion to and from NetworkX graphs.
"""
