"""
command_jobs.py

Defines a base class for command jobs and the encode job that runs one
rendition through the external encoder under a timeout.
"""

import logging
from typing import List, Optional

from .utils import run_cmd
from .exceptions import CommandExecutionError

logger = logging.getLogger(__name__)

class CommandJob:
    """
    Base class representing a command job.

    Attributes:
        cmd (List[str]): The command to run
        timeout (Optional[float]): Wall-clock limit in seconds
    """
    def __init__(self, cmd: List[str], timeout: Optional[float] = None):
        self.cmd = cmd
        self.timeout = timeout

    def execute(self) -> str:
        """
        Execute the stored command.

        Returns:
            str: Captured stderr of the command

        Raises:
            CommandExecutionError: If command fails
            EncoderTimeoutError: If command times out
        """
        logger.debug("Executing command: %s", " ".join(self.cmd))
        result = run_cmd(self.cmd, timeout=self.timeout)
        return result.stderr or ""

class EncodeJob(CommandJob):
    """Job for encoding a single rendition."""
    def __init__(self, cmd: List[str], rendition: str, timeout: Optional[float] = None):
        super().__init__(cmd, timeout)
        self.rendition = rendition

    def execute(self) -> str:
        try:
            return super().execute()
        except CommandExecutionError as e:
            raise CommandExecutionError(
                f"Rendition {self.rendition} failed with exit code {e.exit_code}",
                module="encode_job",
                exit_code=e.exit_code,
                output=e.output,
            ) from e
