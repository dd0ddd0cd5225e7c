"""
Models for document ingestion pipeline.

Exports: PipelineResult
"""

from .pipeline_result import PipelineResult

__all__ = ["PipelineResult"]
