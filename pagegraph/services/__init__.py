"""
Services for PageGraph.

High-level orchestration:
- BuildPipeline: ingest -> link validation -> field resolution -> page generation
"""

from pagegraph.services.build_pipeline import BuildPipeline

__all__ = ["BuildPipeline"]
