"""prowgen: materialização de jobs resolvidos em jobs da plataforma de CI."""

from .annotations import (  # noqa: F401
    TESTGRID_ALERT_EMAIL,
    TESTGRID_DASHBOARD,
    TESTGRID_NUM_FAILURES,
    dashboard_annotations,
    merge_annotations,
)
from .materializer import GERRIT_REPORT_LABEL, JobMaterializer, filter_release_branching_jobs  # noqa: F401
from .naming import MAX_JOB_NAME_LENGTH, branch_matcher, check_name_length, job_name  # noqa: F401
from .refs import create_extra_refs, parse_extra_repo  # noqa: F401
from .requirements import apply_requirements, select_presets  # noqa: F401
from .triggers import default_trigger_for, presubmit_trigger, rerun_command  # noqa: F401
