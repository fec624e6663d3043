from __future__ import annotations

import logging
from dataclasses import dataclass, field
from string import Template
from typing import Callable, Dict, Iterable, Mapping, Optional

from ..config import PLUGIN_NAME
from ..models import ExecutorResult
from ..schemas import TargetConfig
from ..workspace import WorkspaceTree

logger = logging.getLogger(__name__)


class ExecutorError(RuntimeError):
    """Raised when a target cannot be resolved to a registered executor."""


TargetRunner = Callable[..., ExecutorResult]


@dataclass
class ExecutorContext:
    tree: WorkspaceTree
    project_name: Optional[str] = None
    target_name: Optional[str] = None
    log: logging.Logger = field(default_factory=lambda: logger)
    target_runner: Optional[TargetRunner] = None


@dataclass(frozen=True)
class ExecutorSpec:
    name: str
    description: str
    runner: Callable[[ExecutorContext, Mapping[str, object]], ExecutorResult]

    @property
    def executor_id(self) -> str:
        return f"{PLUGIN_NAME}:{self.name}"

    def to_dict(self) -> dict[str, object]:
        return {"executor": self.executor_id, "description": self.description}


_EXECUTORS: Dict[str, ExecutorSpec] = {}


def register_executor(spec: ExecutorSpec) -> None:
    if spec.executor_id in _EXECUTORS:
        raise ValueError(f"Executor '{spec.executor_id}' already registered.")
    _EXECUTORS[spec.executor_id] = spec


def get_executor(executor_id: str) -> ExecutorSpec:
    try:
        return _EXECUTORS[executor_id]
    except KeyError as exc:
        available = ", ".join(sorted(_EXECUTORS))
        raise KeyError(f"Unknown executor '{executor_id}'. Available executors: {available}.") from exc


def list_executors() -> Iterable[ExecutorSpec]:
    return _EXECUTORS.values()


def interpolate_options(value: object, variables: Mapping[str, str]) -> object:
    """Substitute ``${name}`` placeholders in every string nested in ``value``."""

    if isinstance(value, str):
        return Template(value).safe_substitute(variables)
    if isinstance(value, list):
        return [interpolate_options(item, variables) for item in value]
    if isinstance(value, dict):
        return {key: interpolate_options(item, variables) for key, item in value.items()}
    return value


def run_target(
    tree: WorkspaceTree,
    project_name: str,
    target_name: str,
    *,
    overrides: Optional[Mapping[str, object]] = None,
    variables: Optional[Mapping[str, str]] = None,
    log: Optional[logging.Logger] = None,
) -> ExecutorResult:
    """Resolve ``project:target`` from the tree and run its executor."""

    project = tree.get_project(project_name)
    raw_target = project.targets.get(target_name)
    if raw_target is None:
        raise ExecutorError(f"Project '{project_name}' has no target '{target_name}'.")
    target = TargetConfig.model_validate(raw_target)
    if not target.executor:
        raise ExecutorError(f"Target '{project_name}:{target_name}' does not declare an executor.")
    spec = get_executor(target.executor)

    options: Dict[str, object] = {**target.options, **dict(overrides or {})}
    if variables:
        options = interpolate_options(options, variables)  # type: ignore[assignment]

    context = ExecutorContext(
        tree=tree,
        project_name=project_name,
        target_name=target_name,
        log=log or logger,
    )
    (log or logger).info("Running %s:%s (%s)", project_name, target_name, spec.executor_id)
    return spec.runner(context, options)
