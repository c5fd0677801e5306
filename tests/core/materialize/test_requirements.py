# tests/core/materialize/test_requirements.py
"""
Testes da aplicação de requirement presets.

Os testes asseguram que:
- presets são aplicados na ordem de declaração, menos os excluídos
- requirement ausente da tabela falha nomeando job e campo
- labels/annotations do preset não sobrescrevem chaves do job
- volumes não se repetem por nome; env e volumeMounts vão para os containers
- max_concurrency funciona como teto
- o último preset com cron aplicado define o override
"""

import pytest

from prowgen.core.config.schema import RequirementPreset
from prowgen.core.exceptions import RequirementPresetNotFound
from prowgen.core.materialize.requirements import apply_requirements, select_presets
from prowgen.core.prow.types import JobBase


PRESETS = {
    "docker": RequirementPreset(
        volumes=[{"name": "docker-root", "emptyDir": {}}],
        volume_mounts=[{"name": "docker-root", "mountPath": "/var/lib/docker"}],
        privileged=True,
    ),
    "docker-again": RequirementPreset(volumes=[{"name": "docker-root", "emptyDir": {}}]),
    "github": RequirementPreset(labels={"preset-github": "true", "team": "preset"}),
    "env": RequirementPreset(env=[{"name": "GOPROXY", "value": "proxy"}]),
    "serial": RequirementPreset(max_concurrency=1),
    "pair": RequirementPreset(max_concurrency=2),
    "nightly": RequirementPreset(cron="0 1 * * *"),
    "weekly": RequirementPreset(cron="0 1 * * 0"),
}


def _job(**kwargs) -> JobBase:
    return JobBase(name="unit_sample", spec={"containers": [{"image": "img"}]}, **kwargs)


def test_select_presets_skips_excluded_and_keeps_order():
    selected = select_presets(["serial", "github", "docker"], ["github"], PRESETS)
    assert selected == [PRESETS["serial"], PRESETS["docker"]]


def test_unknown_requirement_fails():
    with pytest.raises(RequirementPresetNotFound) as exc:
        select_presets(["gpu"], [], PRESETS, job="unit", source="catalog.yaml")
    assert exc.value.details["job"] == "unit"
    assert exc.value.details["field"] == "requirements"
    assert exc.value.details["value"] == "gpu"


def test_unknown_excluded_requirement_fails():
    with pytest.raises(RequirementPresetNotFound) as exc:
        select_presets([], ["gpu"], PRESETS)
    assert exc.value.details["field"] == "excluded_requirements"


def test_volumes_mounts_and_privilege():
    job = _job()

    apply_requirements(job, ["docker", "docker-again"], [], PRESETS)

    assert job.spec["volumes"] == [{"name": "docker-root", "emptyDir": {}}]
    container = job.spec["containers"][0]
    assert container["volumeMounts"] == [{"name": "docker-root", "mountPath": "/var/lib/docker"}]
    assert container["securityContext"] == {"privileged": True}


def test_labels_do_not_override_job_keys():
    job = _job(labels={"team": "job"})

    apply_requirements(job, ["github"], [], PRESETS)

    assert job.labels == {"team": "job", "preset-github": "true"}


def test_env_appended_to_containers():
    job = _job()
    job.spec["containers"].append({"image": "sidecar"})

    apply_requirements(job, ["env"], [], PRESETS)

    for container in job.spec["containers"]:
        assert container["env"] == [{"name": "GOPROXY", "value": "proxy"}]


@pytest.mark.parametrize(
    "initial, requirements, expected",
    [
        (0, ["serial"], 1),
        (5, ["pair"], 2),
        (1, ["pair"], 1),
        (0, ["pair", "serial"], 1),
    ],
)
def test_max_concurrency_is_a_cap(initial, requirements, expected):
    job = _job(max_concurrency=initial)
    apply_requirements(job, requirements, [], PRESETS)
    assert job.max_concurrency == expected


def test_last_cron_override_wins():
    assert apply_requirements(_job(), ["nightly", "weekly"], [], PRESETS) == "0 1 * * 0"
    assert apply_requirements(_job(), ["nightly", "weekly"], ["weekly"], PRESETS) == "0 1 * * *"
    assert apply_requirements(_job(), ["docker"], [], PRESETS) is None


def test_presets_are_not_aliased_into_job():
    job = _job()
    apply_requirements(job, ["docker"], [], PRESETS)

    job.spec["volumes"][0]["emptyDir"]["medium"] = "Memory"

    assert PRESETS["docker"].volumes == [{"name": "docker-root", "emptyDir": {}}]
