"""
CipherDash -- Geometric Cipher Playground
==========================================

Educational toolkit for composing chains of classical text
transformations, deriving keys from hand-drawn polygons, scoring the
result for apparent strength, and simulating simple cryptanalysis
attacks against it.

Modules:
    - cipherdash.core.engine: Central orchestrator
    - cipherdash.core.models: Pydantic data models
    - cipherdash.core.nodes: Cipher node variants
    - cipherdash.core.pipeline: Ordered node pipeline
    - cipherdash.analyzers: Geometry, scoring and attack analyzers
    - cipherdash.parsers: Node and vertex specification parsing
    - cipherdash.output: Console and report output
    - cipherdash.cli: Click-based command-line interface

References:
    - Shannon, C. E. (1949). Communication Theory of Secrecy Systems.
    - Sinkov, A. (1966). Elementary Cryptanalysis: A Mathematical Approach.
"""

__version__ = "1.0.0"
__tool_name__ = "cipherdash"
