"""
Utility functions for the NYC incident pipelines.
"""

from .logging import log_step, show_pipeline_table, clear_pipeline_log, pipeline_log

__all__ = ["log_step", "show_pipeline_table", "clear_pipeline_log", "pipeline_log"]
