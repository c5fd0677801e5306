"""prowgen: serialização, escrita, check e diff do documento de jobs."""

from .diff import CREATED, MISSING, MODIFIED, DiffReport, JobDiff, diff, diff_job_configs  # noqa: F401
from .render import (  # noqa: F401
    DEFAULT_AUTOGEN_HEADER,
    check_job_config,
    read_job_manifest,
    render_job_config,
    write_job_config,
)
