"""
Storage workflows.
"""

from .reconcile_uploads_wf import reconcile_uploads_workflow

__all__ = ["reconcile_uploads_workflow"]
