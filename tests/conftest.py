"""Shared fixtures for rego-loader tests."""

from __future__ import annotations

import logging

import pytest

from rego_loader.constants import LOGGER_NAMESPACE

DENY_POLICY = """\
package main

import data.lib.kubernetes
import future.keywords.in

# Deny containers running as root
deny[msg] {
    input.kind == "Deployment"
    not input.spec.template.spec.securityContext.runAsNonRoot
    msg := sprintf("Containers must not run as root in %s", [input.metadata.name])
}

warn[msg] {
    some container in input.spec.containers
    endswith(container.image, ":latest")
    msg = "image uses latest tag"
}
"""

V1_POLICY = """\
package policy.replicas

import rego.v1

violation contains msg if {
\tinput.spec.replicas < 2
\tmsg := "too few replicas"
}

allow if input.user == "admin"

default allow := false
"""

LIBRARY = """\
package lib.kubernetes

# Helpers shared by policies
is_deployment {
    input.kind == "Deployment"
}

containers[c] {
    c := input.spec.template.spec.containers[_]
}
"""


@pytest.fixture
def deny_policy() -> str:
    return DENY_POLICY


@pytest.fixture
def v1_policy() -> str:
    return V1_POLICY


@pytest.fixture
def library() -> str:
    return LIBRARY


@pytest.fixture
def policy_files() -> dict[str, str]:
    """Mapping with two policies and one library."""
    return {
        "policy/deployment.rego": DENY_POLICY,
        "policy/replicas.rego": V1_POLICY,
        "lib/kubernetes.rego": LIBRARY,
    }


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by CLI runs so they do not leak between tests."""
    yield
    logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
