"""Shared fixtures: an in-memory registry and a naive test solver."""
from typing import Dict, List, Optional

import pytest

from pubgrub_pypi.config import ResolverConfig
from pubgrub_pypi.errors import NotFoundError, UnresolvableError
from pubgrub_pypi.registry.base import ProjectRelease, RegistryClient
from pubgrub_pypi.resolver.provider import PyPIDependencyProvider
from pubgrub_pypi.versioning.ranges import Range


class FakeRegistry(RegistryClient):
    """RegistryClient serving canned data and recording every call.

    ``projects`` maps a project name to {version text: requires_dist or None},
    in the order the registry lists them.
    """

    def __init__(self, projects: Optional[Dict[str, Dict[str, Optional[List[str]]]]] = None):
        self.projects = projects or {}
        self.yanked = set()
        self.missing = set()
        self.errors = {}
        self.release_calls = []
        self.requires_calls = []
        self.closed = False

    def get_project_releases(self, name):
        self.release_calls.append(name)
        if name in self.errors:
            raise self.errors[name]
        if name not in self.projects:
            raise NotFoundError(name)
        return [ProjectRelease(v, (name, v) in self.yanked) for v in self.projects[name]]

    def get_requires_dist(self, name, version):
        self.requires_calls.append((name, version))
        if (name, version) in self.errors:
            raise self.errors[(name, version)]
        versions = self.projects.get(name, {})
        if version not in versions or (name, version) in self.missing:
            raise NotFoundError(name, version)
        return list(versions[version] or [])

    def close(self):
        self.closed = True


def greedy_solve(provider, package, allowed):
    """Pick-highest solver without backtracking; enough to drive a provider."""
    constraints = {package: allowed}
    solution = {}
    while True:
        pending = [(name, rng) for name, rng in sorted(constraints.items()) if name not in solution]
        if not pending:
            return solution
        name, version = provider.choose_package_version(pending)
        if version is None:
            raise UnresolvableError(f"no version of {name} satisfies {constraints[name]}")
        deps = provider.get_dependencies(name, version)
        if not deps.is_available:
            constraints[name] = constraints[name].intersection(Range.exact(version).complement())
            continue
        solution[name] = version
        for dep, rng in deps.requirements.items():
            merged = constraints.get(dep, Range.any()).intersection(rng)
            if dep in solution and solution[dep] not in merged:
                raise UnresolvableError(f"{dep} {solution[dep]} conflicts with {merged}")
            constraints[dep] = merged


@pytest.fixture
def registry():
    """A small registry: pkg depends on foo and bar, foo on baz."""
    return FakeRegistry({
        "pkg": {
            "0.9": None,
            "1.0.0": ["foo>=1.0,<2.0", "bar"],
            "9.9.9": [],
        },
        "foo": {
            "0.5": [],
            "1.0": ["baz~=2.1"],
            "1.5": ["baz~=2.1"],
            "2.0": [],
        },
        "bar": {"1.0": [], "1.1rc1": []},
        "baz": {"2.0": [], "2.1": [], "2.4": [], "3.0": []},
    })


@pytest.fixture
def config():
    """Sequential configuration: no prefetch threads."""
    return ResolverConfig(prefetch_workers=0)


@pytest.fixture
def provider(registry, config):
    """Provider over the fake registry, closed after the test."""
    with PyPIDependencyProvider(registry, config) as p:
        yield p


@pytest.fixture
def solver():
    return greedy_solve
