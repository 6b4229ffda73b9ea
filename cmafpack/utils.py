"""Utility functions for the cmafpack packaging pipeline"""

import logging
import shutil
import subprocess
from datetime import datetime
from typing import List, Optional

import psutil

from .exceptions import CommandExecutionError, DependencyError, EncoderTimeoutError

logger = logging.getLogger(__name__)

# Lines of encoder output kept on failure
OUTPUT_TAIL_LINES = 20

def kill_process_tree(pid: int) -> None:
    """Forcibly terminate a process and every child it spawned."""
    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return
    procs = parent.children(recursive=True) + [parent]
    for proc in procs:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            pass
    _, alive = psutil.wait_procs(procs, timeout=5)
    for proc in alive:
        logger.warning("Process %d survived kill", proc.pid)

def tail(text: Optional[str], lines: int = OUTPUT_TAIL_LINES) -> str:
    """Return the last few lines of command output"""
    if not text:
        return ""
    return "\n".join(text.strip().splitlines()[-lines:])

def run_cmd(cmd: List[str], timeout: Optional[float] = None) -> subprocess.CompletedProcess:
    """
    Run a command, capturing its output, and handle errors

    Args:
        cmd: Command list
        timeout: Wall-clock limit in seconds; None waits forever

    Returns:
        The completed process

    Raises:
        EncoderTimeoutError: If the command outlives the timeout (it is killed)
        CommandExecutionError: If the command cannot start or exits non-zero
    """
    logger.info("Running command: %s", " ".join(cmd))
    try:
        process = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    except OSError as e:
        raise CommandExecutionError(f"Could not start {cmd[0]}: {e}", module="utils") from e

    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as e:
        logger.error("Command timed out after %.0fs, killing: %s", timeout, cmd[0])
        kill_process_tree(process.pid)
        process.communicate()
        raise EncoderTimeoutError(f"{cmd[0]} timed out after {timeout:.0f}s", module="utils") from e

    if stdout:
        logger.debug("Command stdout: %s", stdout)
    if stderr:
        logger.debug("Command stderr: %s", stderr)

    if process.returncode != 0:
        logger.error("Command failed: %s", " ".join(cmd))
        logger.error("Error output: %s", tail(stderr))
        raise CommandExecutionError(
            f"{cmd[0]} exited with code {process.returncode}",
            module="utils",
            exit_code=process.returncode,
            output=tail(stderr),
        )
    return subprocess.CompletedProcess(cmd, process.returncode, stdout, stderr)

def get_timestamp() -> str:
    """Get current timestamp in YYYYMMDD_HHMMSS format"""
    return datetime.now().strftime("%Y%m%d_%H%M%S")

def format_elapsed(seconds: float) -> str:
    """Format an elapsed time as 00h 00m 00s"""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    return f"{hours:02d}h {minutes:02d}m {secs:02d}s"

def check_dependencies(required: Optional[List[str]] = None) -> None:
    """
    Check for required executables

    Raises:
        DependencyError: If any executable is not on PATH
    """
    from .config import FFMPEG_PATH, FFPROBE_PATH
    for cmd in required or [FFMPEG_PATH, FFPROBE_PATH]:
        if shutil.which(cmd) is None:
            logger.error("Required dependency not found: %s", cmd)
            raise DependencyError(f"Required dependency not found: {cmd}", module="utils")
