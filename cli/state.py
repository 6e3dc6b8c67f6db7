"""REPL state management."""

from datetime import datetime
from typing import List, Optional

from actionhost.actions.executor import ExecutionResult


class REPLState:
    """REPL state management."""

    def __init__(self, layer: str = "workspace"):
        self.layer = layer  # settings layer written by /enable, /disable, /set
        self.last_action: Optional[str] = None
        self.last_result: Optional[ExecutionResult] = None
        self.run_history: List[dict] = []

    def record_run(self, action_name: str, result: ExecutionResult) -> None:
        """Remember a finished run.

        Args:
            action_name: Name of the action that ran
            result: Its execution result
        """
        self.last_action = action_name
        self.last_result = result
        self.run_history.append({
            "action": action_name,
            "success": result.success,
            "duration_ms": result.duration_ms,
            "finished_at": datetime.now().isoformat(timespec="seconds"),
        })
