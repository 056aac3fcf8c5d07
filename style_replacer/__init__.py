"""Smart Style Replacer - Pandoc custom-style compilation step.

Rewrites scene lines that start with a user-defined marker into
fenced-div blocks carrying a custom paragraph style:
- Marker block transformer (the compilation step itself)
- Step registry with option presets
- HTTP API for step discovery and execution
"""

__version__ = "0.1.0"
