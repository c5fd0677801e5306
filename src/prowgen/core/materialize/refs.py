"""
Resolução de repositórios extras em descritores de checkout.

Cada referência tem a forma `org/repo[@branch]`. Sem `@branch`, usa-se a
branch alvo do job. Organizações com alias configurado recebem
`path_alias = <alias>/<repo>`. Um `.` no nome da organização indica um
host que não segue a convenção padrão (ex.: Gerrit): nesse caso o clone é
explícito, `https://<org>/<repo>`.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from prowgen.core.prow.types import Refs


def parse_extra_repo(extra_repo: str, default_branch: str) -> Refs:
    org_repo, _, branch = extra_repo.partition("@")
    org, _, repo = org_repo.rpartition("/")
    return Refs(org=org, repo=repo, base_ref=branch or default_branch)


def create_extra_refs(
    extra_repos: List[str],
    default_branch: str,
    path_aliases: Optional[Dict[str, str]] = None,
) -> List[Refs]:
    aliases = path_aliases or {}
    refs: List[Refs] = []
    for extra_repo in extra_repos:
        ref = parse_extra_repo(extra_repo, default_branch)
        if ref.org in aliases:
            ref.path_alias = f"{aliases[ref.org]}/{ref.repo}"
        if "." in ref.org:
            ref.clone_uri = f"https://{ref.org}/{ref.repo}"
        refs.append(ref)
    return refs
