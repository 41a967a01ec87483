"""
PageGraph - typed content graph build pipeline.

Ingests records into a linked node graph, resolves computed fields
(including network-backed assets) and emits page descriptors for a
static renderer.
"""

__version__ = "0.1.0"
