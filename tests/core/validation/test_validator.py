# tests/core/validation/test_validator.py
"""
Testes do validator de catálogos.

Os testes asseguram que:
- um catálogo válido não produz violações
- cada regra é avaliada de forma independente
- N violações independentes produzem N violações (coleta completa)
- regras de periódicos (cron XOR interval, cron válido, interval válido)
- `raise_for_violations` transforma a lista em erro múltiplo

Decisões arquiteturais:
    - O validator recebe catálogos já resolvidos, como no compilador
    - Violações são comparadas pelo código estável (`type`)
"""

import pytest

try:
    from prowgen.core import errors as E
    from prowgen.core.config.merge import resolve_overwrites
    from prowgen.core.exceptions import CatalogValidationError, raise_for_violations
    from prowgen.core.validation import is_valid_cron, validate_jobs_config
except Exception as e:  # noqa: BLE001
    validate_jobs_config = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing validator. Implement:\n"
            "- src/prowgen/core/validation/validator.py (validate_jobs_config)\n"
            f"Import error: {_IMPORT_ERR}"
        )


@pytest.fixture
def validate(base_config, make_catalog):
    def _validate(data):
        return validate_jobs_config(resolve_overwrites(base_config.common, make_catalog(data)))

    return _validate


def _types(violations):
    return [v.type for v in violations]


def test_valid_catalog_has_no_violations(base_config, catalog):
    _require_imports()
    from prowgen.core.engine.matrix import expand_jobs_config

    resolved = expand_jobs_config(resolve_overwrites(base_config.common, catalog))
    assert validate_jobs_config(resolved) == []


def test_org_and_repo_required(validate):
    _require_imports()
    violations = validate({"jobs": [{"name": "unit"}]})
    assert _types(violations) == [E.ORG_MISSING, E.REPO_MISSING]


def test_image_required_without_inherited_default(make_catalog):
    _require_imports()
    violations = validate_jobs_config(make_catalog({"org": "o", "repo": "r", "jobs": [{"name": "unit"}]}))
    assert _types(violations) == [E.JOB_IMAGE_MISSING]
    assert violations[0].details["job"] == "unit"
    assert violations[0].details["source"] == "catalog.yaml"


def test_name_required(validate):
    _require_imports()
    assert _types(validate({"org": "o", "repo": "r", "jobs": [{"image": "img"}]})) == [E.JOB_NAME_MISSING]


def test_unknown_resource_preset(validate):
    _require_imports()
    violations = validate({"org": "o", "repo": "r", "jobs": [{"name": "unit", "resources": "huge"}]})
    assert _types(violations) == [E.JOB_RESOURCE_UNKNOWN]
    assert violations[0].details["value"] == "huge"


@pytest.mark.parametrize(
    "job, code",
    [
        ({"name": "u", "modifiers": ["flaky"]}, "JOB_MODIFIER_INVALID"),
        ({"name": "u", "types": ["nightly"]}, "JOB_TYPE_INVALID"),
        ({"name": "u", "architectures": ["s390x"]}, "JOB_ARCHITECTURE_INVALID"),
        ({"name": "u", "timeout": "soon"}, "JOB_TIMEOUT_INVALID"),
        ({"name": "u", "repos": ["just-a-repo"]}, "JOB_REPO_INVALID"),
        ({"name": "u", "requirements": ["gpu"]}, "JOB_REQUIREMENT_UNKNOWN"),
        ({"name": "u", "excluded_requirements": ["gpu"]}, "JOB_REQUIREMENT_UNKNOWN"),
    ],
)
def test_closed_sets_and_formats(validate, job, code):
    _require_imports()
    assert _types(validate({"org": "o", "repo": "r", "jobs": [job]})) == [code]


def test_extra_repo_with_branch_is_valid(validate):
    _require_imports()
    assert validate({"org": "o", "repo": "r", "jobs": [{"name": "u", "repos": ["other/dep@release-1.0"]}]}) == []


def test_periodic_with_cron_and_interval_is_rejected(validate):
    _require_imports()
    job = {"name": "p", "types": ["periodic"], "cron": "0 * * * *", "interval": "1h"}
    assert _types(validate({"org": "o", "repo": "r", "jobs": [job]})) == [E.PERIODIC_SCHEDULE_CONFLICT]


def test_periodic_without_schedule_is_rejected(validate):
    _require_imports()
    job = {"name": "p", "types": ["periodic"]}
    assert _types(validate({"org": "o", "repo": "r", "jobs": [job]})) == [E.PERIODIC_SCHEDULE_MISSING]


def test_periodic_with_invalid_cron_is_rejected(validate):
    _require_imports()
    job = {"name": "p", "types": ["periodic"], "cron": "every day"}
    assert _types(validate({"org": "o", "repo": "r", "jobs": [job]})) == [E.PERIODIC_CRON_INVALID]


def test_periodic_with_invalid_interval_is_rejected(validate):
    _require_imports()
    job = {"name": "p", "types": ["periodic"], "interval": "daily"}
    assert _types(validate({"org": "o", "repo": "r", "jobs": [job]})) == [E.PERIODIC_INTERVAL_INVALID]


@pytest.mark.parametrize("expr", ["0 3 * * *", "*/5 * * * *", "0 0 * * 1-5", "0 0 1 1 * 0"])
def test_valid_cron_expressions(expr):
    _require_imports()
    assert is_valid_cron(expr)


@pytest.mark.parametrize("expr", ["every day", "0 3 * *", "61 * * * *", "* * * * * * *"])
def test_invalid_cron_expressions(expr):
    _require_imports()
    assert not is_valid_cron(expr)


def test_duplicate_names_within_same_type(validate):
    _require_imports()
    violations = validate({
        "org": "o",
        "repo": "r",
        "jobs": [
            {"name": "unit", "types": ["presubmit"]},
            {"name": "unit", "types": ["postsubmit"]},
            {"name": "lint"},
            {"name": "lint", "types": ["presubmit"]},
        ],
    })
    assert _types(violations) == [E.JOB_NAME_DUPLICATED]
    assert violations[0].details["job"] == "lint"


def test_all_independent_violations_are_collected(validate):
    """
    Um catálogo com N violações independentes deve retornar as N, não
    apenas a primeira.
    """
    _require_imports()
    violations = validate({
        "org": "o",
        "repo": "r",
        "jobs": [
            {"name": "a", "modifiers": ["flaky"], "types": ["nightly"]},
            {"name": "b", "resources": "huge"},
            {"name": "c", "types": ["periodic"]},
            {"name": "d", "repos": ["bad"], "timeout": "soon"},
        ],
    })
    assert _types(violations) == [
        E.JOB_MODIFIER_INVALID,
        E.JOB_TYPE_INVALID,
        E.JOB_RESOURCE_UNKNOWN,
        E.PERIODIC_SCHEDULE_MISSING,
        E.JOB_TIMEOUT_INVALID,
        E.JOB_REPO_INVALID,
    ]


def test_raise_for_violations(validate):
    _require_imports()
    violations = validate({"org": "o", "repo": "r", "jobs": [{"name": "a", "types": ["nightly"]}]})

    with pytest.raises(CatalogValidationError) as exc:
        raise_for_violations("catalog.yaml", violations)

    assert exc.value.violations == violations
    assert "catalog.yaml: 'nightly' is not a valid types" in str(exc.value)


def test_raise_for_violations_noop_when_empty():
    _require_imports()
    raise_for_violations("catalog.yaml", [])


def test_presets_declared_on_the_job_are_accepted(validate):
    _require_imports()
    violations = validate({
        "org": "o",
        "repo": "r",
        "jobs": [
            {
                "name": "unit",
                "resources_presets": {"huge": {"requests": {"cpu": "16"}}},
                "resources": "huge",
                "requirement_presets": {"kvm": {"labels": {"preset-kvm": "true"}}},
                "requirements": ["kvm"],
            }
        ],
    })
    assert violations == []
