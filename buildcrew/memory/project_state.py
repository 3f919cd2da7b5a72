"""
Project state accumulation across phases.

Each field has exactly one producing agent. A field may be written once per
run, and read only after its producer reached "completed". The accumulator is
not thread-safe; the orchestrator serializes all writes, and concurrent
phases write disjoint fields.
"""

from typing import Any, Dict, Iterable, List

from ..exceptions import DependencyNotReadyError, DuplicateWriteError
from ..models import AgentId, AgentStatus, GeneratedFile, ProjectState, ProjectType
from .status_tracker import StatusTracker


FIELD_PRODUCERS: Dict[str, AgentId] = {
    "architecture": AgentId.architect,
    "frontend_design": AgentId.frontend,
    "backend_design": AgentId.backend,
    "database_design": AgentId.database,
    "generated_files": AgentId.code_generator,
    "deployment_config": AgentId.devops,
}

# generated_files grows by append_file(); the rest are set() once
SINGLE_WRITE_FIELDS = frozenset(FIELD_PRODUCERS) - {"generated_files"}


class ProjectStateAccumulator:
    """Single-writer aggregate of the outputs produced so far in a run."""

    def __init__(self, tracker: StatusTracker):
        self._tracker = tracker
        self._requirement = ""
        self._project_type = ProjectType.web
        self._values: Dict[str, Any] = {}
        self._files: List[GeneratedFile] = []

    def reset(self, requirement: str, project_type: ProjectType = ProjectType.web) -> None:
        """Start a new, empty project document for ``requirement``."""
        self._requirement = requirement
        self._project_type = ProjectType(project_type)
        self._values = {}
        self._files = []

    @property
    def requirement(self) -> str:
        return self._requirement

    @property
    def project_type(self) -> ProjectType:
        return self._project_type

    def set(self, field: str, value: Any) -> None:
        if field not in SINGLE_WRITE_FIELDS:
            raise KeyError(f"Unknown or append-only project field: {field}")
        if field in self._values:
            raise DuplicateWriteError(f"Project field '{field}' was already written in this run")
        self._values[field] = value

    def append_file(self, file: GeneratedFile) -> None:
        self._files.append(file)

    def is_set(self, field: str) -> bool:
        if field == "generated_files":
            return True
        return field in self._values

    def get(self, field: str) -> Any:
        """
        Read a field produced by an earlier phase.

        Raises:
            DependencyNotReadyError: If the producing agent has not completed
                or the field was never written
        """
        if field == "requirement":
            return self._requirement
        if field not in FIELD_PRODUCERS:
            raise KeyError(f"Unknown project field: {field}")

        producer = self._tracker.get(FIELD_PRODUCERS[field])
        if producer.status != AgentStatus.completed:
            raise DependencyNotReadyError(
                f"'{field}' is not readable: {producer.id.value} is {producer.status.value}"
            )
        if not self.is_set(field):
            raise DependencyNotReadyError(f"'{field}' was never written in this run")

        if field == "generated_files":
            return list(self._files)
        return self._values[field]

    def require(self, fields: Iterable[str]) -> None:
        for field in fields:
            self.get(field)

    @property
    def file_count(self) -> int:
        return len(self._files)

    def build(self) -> ProjectState:
        """Assemble the final document; every field must be readable."""
        values = {field: self.get(field) for field in FIELD_PRODUCERS}
        return ProjectState(
            requirement=self._requirement,
            project_type=self._project_type,
            **values,
        )
