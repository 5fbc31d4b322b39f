# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Update and add workflows."""

from __future__ import annotations

from .add import AddResult, AddWorkflowOrchestrator, PackageSpec, parse_package_spec
from .bootstrap import BootstrapWorkflowOrchestrator
from .orchestrator import WorkflowOrchestrator
from .services import WorkflowServices, build_services
from .steps import StepContext, WorkflowStep, default_steps

__all__ = [
    "AddResult",
    "AddWorkflowOrchestrator",
    "BootstrapWorkflowOrchestrator",
    "PackageSpec",
    "StepContext",
    "WorkflowOrchestrator",
    "WorkflowServices",
    "WorkflowStep",
    "build_services",
    "default_steps",
    "parse_package_spec",
]
