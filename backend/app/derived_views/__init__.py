"""Derived views: read-only views for UI consumption.

The dashboard reads a snapshot of flat rows (``dashboard``) and derives every
list it shows through the pure view pipeline (``pipeline``) driven by an
immutable state value (``state``). Nothing in the pipeline touches the DB.
"""
