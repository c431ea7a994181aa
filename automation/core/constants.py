"""Core constants: engine limits and shared literal values.

Defaults for Settings; the engine reads the effective values from
get_settings() so deployments can tighten them.
"""

# Per-workflow wall-clock budget for one evaluation.
DEFAULT_EXECUTION_TIMEOUT_SECONDS = 5.0

# Maximum operation nesting (operator inside operator) in a logic tree.
DEFAULT_MAX_RECURSION_DEPTH = 10

# Maximum workflows evaluated for a single trigger.
DEFAULT_MAX_WORKFLOWS_PER_TRIGGER = 100

# Sequential evaluation unless configured otherwise.
DEFAULT_MAX_CONCURRENCY = 1

# Start method for sandbox workers; forkserver workers never inherit host threads.
DEFAULT_SANDBOX_START_METHOD = "forkserver"

SANDBOX_START_METHODS = ("fork", "spawn", "forkserver")

# Separator for variable paths in logic trees (e.g. "user.country").
VAR_PATH_SEP = "."
