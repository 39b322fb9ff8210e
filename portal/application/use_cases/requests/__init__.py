"""Request use cases."""

from portal.application.use_cases.requests.request_workflow import RequestWorkflow

__all__ = ["RequestWorkflow"]
