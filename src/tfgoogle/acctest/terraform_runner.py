"""
Terraform CLI Wrapper for acceptance tests.

Runs Terraform against a working directory holding a rendered main.tf.
Provider credentials come from the environment (GOOGLE_PROJECT,
GOOGLE_CREDENTIALS, ...), exactly as Terraform itself resolves them.

Usage:
    from tfgoogle.acctest.terraform_runner import TerraformRunner

    runner = TerraformRunner(working_dir="/tmp/acc/main")
    runner.init()
    runner.apply(plan_file=runner.plan())
    state = runner.show_state()
    runner.destroy()
"""

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

# `plan -detailed-exitcode` results
PLAN_EMPTY = 0
PLAN_HAS_CHANGES = 2


class TerraformError(Exception):
    """Raised when a Terraform command fails."""

    def __init__(self, command: str, return_code: int, stderr: str):
        self.command = command
        self.return_code = return_code
        self.stderr = stderr
        super().__init__(f"Terraform {command} failed (exit {return_code}): {stderr}")


def _combined_output(result: subprocess.CompletedProcess) -> str:
    parts = [part for part in (result.stdout, result.stderr) if part]
    return "\n".join(parts) or "No output captured"


class TerraformRunner:
    """
    Runs Terraform commands in one working directory.

    Attributes:
        working_dir: Directory containing main.tf
        binary: Terraform executable name or path
    """

    def __init__(self, working_dir: str, binary: str = "terraform"):
        """
        Raises:
            ValueError: If working_dir is empty or does not exist
        """
        if not working_dir:
            raise ValueError("working_dir is required")

        self.working_dir = Path(working_dir)
        self.binary = binary

        if not self.working_dir.exists():
            raise ValueError(f"Terraform directory does not exist: {working_dir}")

    def _run_command(self, args: list[str], check: bool = True, stream_output: bool = False) -> subprocess.CompletedProcess:
        """
        Run `terraform -chdir=<working_dir> <args>`.

        Long-running commands (apply, destroy) stream their output to the
        console while it is captured for error reporting.

        Raises:
            TerraformError: If check is set and the command exits non-zero
        """
        cmd = [self.binary, f"-chdir={self.working_dir}"] + args
        logger.info(f"Running: {' '.join(cmd)}")

        if stream_output:
            process = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True, bufsize=1)
            lines = []
            for line in process.stdout:
                print(line, end="", flush=True)
                lines.append(line)
            process.wait()
            result = subprocess.CompletedProcess(cmd, process.returncode, stdout="".join(lines), stderr=None)
        else:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)

        if check and result.returncode != 0:
            raise TerraformError(args[0], result.returncode, _combined_output(result))
        return result

    def _run_json(self, args: list[str]) -> Any:
        stdout = self._run_command(args).stdout or ""
        return json.loads(stdout) if stdout.strip() else {}

    def init(self) -> None:
        self._run_command(["init", "-input=false"])
        logger.info("✓ Terraform initialized")

    def validate(self) -> None:
        self._run_command(["validate"])
        logger.info("✓ Configuration is valid")

    def plan(self) -> str:
        """
        Save an execution plan to `tfplan` in the working directory.

        Returns:
            Path to the plan file
        """
        plan_file = str(self.working_dir / "tfplan")
        self._run_command(["plan", "-input=false", f"-out={plan_file}"])
        return plan_file

    def has_pending_changes(self) -> bool:
        """
        Whether a fresh plan would change anything.

        Raises:
            TerraformError: If plan fails (any exit code other than 0 or 2)
        """
        result = self._run_command(["plan", "-input=false", "-detailed-exitcode"], check=False)
        if result.returncode == PLAN_EMPTY:
            return False
        if result.returncode == PLAN_HAS_CHANGES:
            return True
        raise TerraformError("plan", result.returncode, _combined_output(result))

    def plan_output(self) -> str:
        """Human-readable plan text, used in error messages."""
        return self._run_command(["plan", "-input=false", "-no-color"]).stdout or ""

    def apply(self, plan_file: Optional[str] = None) -> None:
        """Apply a saved plan, or the current configuration when none is given."""
        args = ["apply", "-input=false"]
        args += [plan_file] if plan_file else ["-auto-approve"]
        self._run_command(args, stream_output=True)
        logger.info("✓ Apply complete")

    def destroy(self) -> None:
        self._run_command(["destroy", "-input=false", "-auto-approve"], stream_output=True)
        logger.info("✓ Destroy complete")

    def import_resource(self, address: str, resource_id: str) -> None:
        """Import an existing object into this working directory's state."""
        self._run_command(["import", "-input=false", address, resource_id])
        logger.info(f"✓ Imported {address} (id={resource_id})")

    def output(self) -> dict:
        """Root module outputs as {name: value}."""
        return {name: output.get("value") for name, output in self._run_json(["output", "-json"]).items()}

    def show_state(self) -> dict:
        """`terraform show -json` of the current state ({} when there is none)."""
        return self._run_json(["show", "-json"])
