"""
Exception types for the craps ruin simulator.
"""


class ConfigError(ValueError):
    """Raised when a simulation or table configuration is invalid."""


class InvariantViolation(RuntimeError):
    """
    Raised when bet or bankroll accounting reaches an impossible state.

    This is a defect, not a game outcome: the trial that hit it is halted.
    """


class TrialFailed(RuntimeError):
    """Raised by the scenario runner when one trial hits an invariant violation."""

    def __init__(self, trial_index: int, cause: Exception):
        # Keep both in args so the exception survives pickling from workers
        super().__init__(trial_index, cause)
        self.trial_index = trial_index
        self.cause = cause

    def __str__(self) -> str:
        return f"Trial {self.trial_index} failed: {self.cause}"
