"""prowgen: tipos do manifesto de jobs da plataforma de CI."""

from .types import (  # noqa: F401
    JobBase,
    JobConfigOutput,
    MaterializedJobs,
    Periodic,
    Postsubmit,
    Presubmit,
    Refs,
)
