# tests/core/output/test_diff.py
"""
Testes do diff estrutural entre documentos gerados e persistidos.

Os testes asseguram que:
- jobs só do lado gerado são reportados como criados
- jobs nos dois lados com diferenças de campo são reportados com as diferenças
- jobs só do lado persistido são reportados como ausentes
- cada coleção (presubmit, postsubmit, periódico) é tratada de forma independente
- documentos iguais produzem relatório vazio
"""

from prowgen.core.output.diff import CREATED, MISSING, MODIFIED, diff, diff_job_configs


def _doc(presubmits=(), postsubmits=(), periodics=()):
    out = {}
    if presubmits:
        out["presubmits"] = {"org/sample": list(presubmits)}
    if postsubmits:
        out["postsubmits"] = {"org/sample": list(postsubmits)}
    if periodics:
        out["periodics"] = list(periodics)
    return out


def _job(name, image="img:1", **extra):
    job = {"name": name, "spec": {"containers": [{"image": image}]}}
    job.update(extra)
    return job


def test_identical_documents_have_empty_report():
    doc = _doc(presubmits=[_job("unit_sample")], periodics=[_job("nightly_sample_periodic")])
    report = diff_job_configs(doc, doc)
    assert report.is_empty()


def test_created_modified_missing():
    generated = _doc(presubmits=[_job("new_sample"), _job("unit_sample", image="img:2")])
    persisted = _doc(presubmits=[_job("unit_sample"), _job("old_sample")])

    report = diff_job_configs(generated, persisted)

    assert [(e.status, e.name) for e in report.entries] == [
        (CREATED, "new_sample"),
        (MODIFIED, "unit_sample"),
        (MISSING, "old_sample"),
    ]
    modified = report.by_status(MODIFIED)[0]
    assert any("img:2" in change for change in modified.changes)
    assert any("containers" in change for change in modified.changes)


def test_kinds_are_independent():
    """Um mesmo nome em coleções diferentes não conta como correspondência."""
    generated = _doc(postsubmits=[_job("unit_sample")])
    persisted = _doc(presubmits=[_job("unit_sample")])

    report = diff_job_configs(generated, persisted)

    assert [(e.kind, e.status) for e in report.entries] == [
        ("presubmit", MISSING),
        ("postsubmit", CREATED),
    ]


def test_periodics_are_compared():
    report = diff_job_configs(_doc(periodics=[_job("p", cron="0 1 * * *")]), _doc(periodics=[_job("p", cron="0 3 * * *")]))
    assert [e.status for e in report.by_status(MODIFIED, kind="periodic")] == [MODIFIED]


def test_render_report():
    generated = _doc(presubmits=[_job("new_sample")], postsubmits=[_job("unit_sample_postsubmit", image="img:2")])
    persisted = _doc(postsubmits=[_job("unit_sample_postsubmit"), _job("old_sample_postsubmit")])

    text = diff(generated, persisted)

    assert "Presubmit diff:" in text
    assert "Created unknown presubmit job new_sample" in text
    assert "Postsubmit diff:" in text
    assert "Diff for unit_sample_postsubmit" in text
    assert "Missing old_sample_postsubmit" in text
    assert "Periodic diff:" in text


def test_accepts_job_config_output(make_catalog):
    from prowgen.core.config.schema import BaseConfig
    from prowgen.core.config.merge import resolve_overwrites
    from prowgen.core.materialize import JobMaterializer

    base = BaseConfig()
    catalog = resolve_overwrites(base.common, make_catalog({
        "org": "org", "repo": "sample", "jobs": [{"name": "unit", "image": "img:1", "types": ["presubmit"]}],
    }))
    output = JobMaterializer(base).convert_jobs_config(catalog, "master")

    assert diff_job_configs(output, output.to_dict()).is_empty()
    assert [e.status for e in diff_job_configs(output, {}).entries] == [CREATED]
