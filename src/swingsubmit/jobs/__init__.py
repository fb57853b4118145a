"""Analysis job polling and progress estimation."""

from .job_models import Job, JobStatus, ProgressSnapshot
from .job_poller import JobPoller

__all__ = ["Job", "JobPoller", "JobStatus", "ProgressSnapshot"]
