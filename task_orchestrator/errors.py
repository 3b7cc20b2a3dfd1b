"""Exception types raised across the orchestrator."""


class TaskOrchestratorError(Exception):
    """Base class for orchestrator errors."""


class TaskInputError(TaskOrchestratorError, ValueError):
    """The task source could not be read or contains a malformed row."""


class TaskOutputError(TaskOrchestratorError):
    """The final report could not be serialized."""


class TaskExecutionError(TaskOrchestratorError):
    """A single task failed. The engine turns this into a FAILED result."""


class ConfigError(TaskOrchestratorError, ValueError):
    """A configuration value is missing, unknown or out of range."""
