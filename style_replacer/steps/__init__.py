"""Compilation steps for scene content.

Provides self-describing steps that rewrite scene text in place, and
a registry that exposes them (plus named option presets) to a host
pipeline.
"""
