"""
Logger utility for the Multi-Resource Safety Checker.

Provides search logging with verbosity levels.
"""

from typing import List, Optional
from datetime import datetime

from models.resources import format_vector


class CheckerLogger:
    """
    Logger for safety-search events and verdicts.

    Format: "Expansion X: O<id> granted - free now [R0:n, ...]"
    """

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None):
        """
        Initialize logger.

        Args:
            verbose: Enable verbose output
            log_file: Optional file path for logging
        """
        self.verbose = verbose
        self.log_file = log_file
        self.file_handle = None

        if self.log_file:
            self.file_handle = open(self.log_file, 'w', encoding='utf-8')
            self._write_header()

    def _write_header(self) -> None:
        """Write log file header."""
        if self.file_handle:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self.file_handle.write(f"Safety Check Log - {timestamp}\n")
            self.file_handle.write("=" * 60 + "\n\n")

    def log(self, message: str, level: str = "info") -> None:
        """
        Log a message.

        Args:
            message: Message to log
            level: Log level (info, debug, warning, error)
        """
        if level == "debug" and not self.verbose:
            return

        formatted = self._format_message(message, level)

        print(formatted)

        if self.file_handle:
            self.file_handle.write(formatted + "\n")
            self.file_handle.flush()

    def _format_message(self, message: str, level: str) -> str:
        """Format message with level prefix."""
        if level == "error":
            return f"[ERROR] {message}"
        elif level == "warning":
            return f"[WARNING] {message}"
        elif level == "debug":
            return f"[DEBUG] {message}"
        else:
            return message

    def log_expansion(self, index: int, free: List[int], pending: List[int]) -> None:
        """Log that a configuration is being expanded."""
        pending_str = ", ".join(f"O{oid}" for oid in pending)
        self.log(
            f"Expansion {index}: free {format_vector(free)}, pending [{pending_str}]",
            "debug"
        )

    def log_grant(self, index: int, owner_id: int, free_after: List[int]) -> None:
        """Log a successor produced by granting one owner."""
        self.log(
            f"Expansion {index}: O{owner_id} granted - free now {format_vector(free_after)}",
            "debug"
        )

    def log_dead_end(self, index: int, free: List[int]) -> None:
        """Log a configuration from which no owner can proceed."""
        self.log(
            f"Expansion {index}: no owner can proceed with free {format_vector(free)}",
            "debug"
        )

    def log_verdict(self, safe: bool, sequence: Optional[List[int]], expansions: int) -> None:
        """
        Log the final verdict.

        Args:
            safe: Verdict
            sequence: Owner ids in grant order, if a complete configuration was reached
            expansions: Number of configurations expanded
        """
        status = "SAFE" if safe else "UNSAFE"
        message = f"Verdict: {status} after {expansions} expansion(s)"
        if sequence is not None:
            message += " (sequence: " + " -> ".join(f"O{oid}" for oid in sequence) + ")"
        self.log(message)

    def log_configuration(self, state_str: str) -> None:
        """Log a configuration display (verbose only)."""
        if self.verbose:
            self.log(state_str)

    def close(self) -> None:
        """Close log file if open."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None

    def __del__(self):
        """Cleanup on destruction."""
        self.close()
