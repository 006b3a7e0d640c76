"""Core data model and pure operations over it.

- ``models``: dataclasses for projects, outdated packages, health, cache.
- ``runner``: the injectable command-execution capability.
- ``versions``: major/minor/patch heuristics.
- ``grouping``: display buckets for outdated packages.
- ``updates``: update and install command construction.
- ``health``: scoring, recommendations, and audit parsing.
- ``engine``: the facade binding a runner and a registry.
"""
