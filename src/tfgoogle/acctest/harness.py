"""
Acceptance test harness.

Drives the Terraform CLI through a sequence of steps against live
infrastructure, in the same shape as Terraform's own provider test framework:

    config step   -> write main.tf, init, plan, apply, check, expect an empty re-plan
    import step   -> import the resource into a fresh working directory and
                     compare its attributes with the applied state
    (always)      -> destroy, then check_destroy

IMPORTANT: Steps create REAL resources and incur costs. Tests using this
harness are marked `live` and only run when TF_ACC is set.

Usage:
    run_test(
        steps=[
            TestStep(config=render_config(CONFIG, context), check=check_resource_attr_set(ADDR, "uid")),
            TestStep(resource_name=ADDR, import_state=True, import_state_verify=True),
        ],
        work_dir=tmp_path,
    )
"""

import logging
import os
import random
import string
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Tuple

from tfgoogle import constants as CONSTANTS
from tfgoogle.core.exceptions import AcceptanceTestError
from tfgoogle.examples.renderer import render_string
from .checks import CheckFunc
from .state import FlatState, dumps, flatten_state, resource_attributes
from .terraform_runner import TerraformError, TerraformRunner

logger = logging.getLogger(__name__)

# Terraform stores operation timeouts in state but never reads them back on import
_ALWAYS_IGNORED_ON_IMPORT = ["timeouts"]


@dataclass
class TestStep:
    """
    One step of an acceptance test.

    Attributes:
        config: Rendered HCL for config steps
        check: State check run after apply
        resource_name: Address of the resource to import (import steps)
        import_state: Marks an import step
        import_state_id: Id to import with (defaults to the resource's id attribute)
        import_state_verify: Compare imported attributes with the applied state
        import_state_verify_ignore: Attribute prefixes excluded from the comparison
        plan_only: Only plan the config, do not apply
        expect_non_empty_plan: A non-empty (re-)plan is expected
        check_outputs: Check run against the root module outputs ({name: value}) after apply
    """

    __test__ = False

    config: str = ""
    check: Optional[CheckFunc] = None
    resource_name: str = ""
    import_state: bool = False
    import_state_id: Optional[str] = None
    import_state_verify: bool = False
    import_state_verify_ignore: List[str] = field(default_factory=list)
    plan_only: bool = False
    expect_non_empty_plan: bool = False
    check_outputs: Optional[Callable[[Mapping[str, Any]], None]] = None


def acc_test_enabled(env: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if env is None else env
    return bool(env.get(CONSTANTS.TF_ACC_ENV_VAR))


def acc_test_pre_check(env: Optional[Mapping[str, str]] = None) -> str:
    """
    Verify the environment can run acceptance tests.

    Returns:
        The project acceptance resources are created in

    Raises:
        AcceptanceTestError: If no project environment variable is set
    """
    env = os.environ if env is None else env
    for name in CONSTANTS.PROJECT_ENV_VARS:
        if env.get(name):
            return env[name]
    raise AcceptanceTestError(
        f"One of {', '.join(CONSTANTS.PROJECT_ENV_VARS)} must be set for acceptance tests"
    )


def random_suffix(length: int = CONSTANTS.RANDOM_SUFFIX_LENGTH) -> str:
    """Lowercase alphanumeric suffix, valid in every Google Cloud resource name."""
    alphabet = string.ascii_lowercase + string.digits
    return "".join(random.choice(alphabet) for _ in range(length))


def render_config(template: str, context: Mapping[str, Any]) -> str:
    """Render an inline HCL test config; undefined variables raise TemplateRenderError."""
    return render_string(template, context, name="acceptance test config")


def diff_attributes(
    expected: Mapping[str, str],
    actual: Mapping[str, str],
    ignore: List[str]
) -> List[Tuple[str, Optional[str], Optional[str]]]:
    """
    Differences between two flat attribute maps.

    Keys starting with any ignore prefix are skipped; a missing collection
    count equals a count of "0".

    Returns:
        Sorted (key, expected, actual) tuples
    """
    prefixes = list(ignore) + _ALWAYS_IGNORED_ON_IMPORT

    def _normalize(attributes: Mapping[str, str]) -> dict:
        return {
            key: value
            for key, value in attributes.items()
            if not any(key.startswith(prefix) for prefix in prefixes)
            and not (key.endswith((".#", ".%")) and value == "0")
        }

    left = _normalize(expected)
    right = _normalize(actual)
    return [
        (key, left.get(key), right.get(key))
        for key in sorted(set(left) | set(right))
        if left.get(key) != right.get(key)
    ]


def _write_config(directory: Path, config: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / CONSTANTS.TERRAFORM_CONFIG_FILE).write_text(config, encoding="utf-8")


def _run_config_step(index: int, step: TestStep, runner: TerraformRunner) -> FlatState:
    if step.plan_only:
        runner.validate()
        has_changes = runner.has_pending_changes()
        if has_changes and not step.expect_non_empty_plan:
            raise AcceptanceTestError(f"Expected an empty plan, got:\n{runner.plan_output()}", step=index)
        if not has_changes and step.expect_non_empty_plan:
            raise AcceptanceTestError("Expected a non-empty plan, but got an empty plan", step=index)
        return flatten_state(runner.show_state())

    plan_file = runner.plan()
    runner.apply(plan_file=plan_file)
    state = flatten_state(runner.show_state())

    if step.check is not None:
        try:
            step.check(state)
        except AssertionError as e:
            raise AcceptanceTestError(f"Check failed: {e}", step=index) from e

    if step.check_outputs is not None:
        try:
            step.check_outputs(runner.output())
        except AssertionError as e:
            raise AcceptanceTestError(f"Output check failed: {e}", step=index) from e

    if runner.has_pending_changes() and not step.expect_non_empty_plan:
        raise AcceptanceTestError(
            f"After applying this test step, the plan was not empty.\n{runner.plan_output()}",
            step=index
        )
    return state


def _run_import_step(
    index: int,
    step: TestStep,
    config: str,
    state: FlatState,
    base_dir: Path,
    runner_factory: Callable[[str], TerraformRunner]
) -> None:
    if not config:
        raise AcceptanceTestError("Import steps need a preceding config step", step=index)
    if not step.resource_name:
        raise AcceptanceTestError("resource_name is required for import steps", step=index)

    try:
        original = resource_attributes(state, step.resource_name)
    except AssertionError as e:
        raise AcceptanceTestError(str(e), step=index) from e

    import_id = step.import_state_id or original.get("id")
    if not import_id:
        raise AcceptanceTestError(f"{step.resource_name} has no id to import", step=index)

    # Separate working directory: never destroyed, it only holds the imported state
    import_dir = base_dir / f"import-{index}"
    _write_config(import_dir, config)
    runner = runner_factory(str(import_dir))
    runner.init()
    runner.import_resource(step.resource_name, import_id)

    if not step.import_state_verify:
        return

    try:
        imported = resource_attributes(flatten_state(runner.show_state()), step.resource_name)
    except AssertionError as e:
        raise AcceptanceTestError(str(e), step=index) from e

    differences = diff_attributes(original, imported, step.import_state_verify_ignore)
    if differences:
        lines = "\n".join(f"  {key}: state={exp!r} imported={act!r}" for key, exp, act in differences)
        raise AcceptanceTestError(
            f"ImportStateVerify attributes not equivalent for {step.resource_name}:\n{lines}",
            step=index
        )
    logger.info(f"✓ Import verified for {step.resource_name}")


def _destroy(runner: TerraformRunner, step_failed: bool) -> None:
    """Destroy everything; after a failed step a destroy error is logged so the step error propagates."""
    try:
        runner.destroy()
    except TerraformError as e:
        if not step_failed:
            raise
        logger.error(f"Destroy failed after a failed step, resources may be left behind: {e}")


def run_test(
    steps: List[TestStep],
    work_dir: str,
    check_destroy: Optional[CheckFunc] = None,
    runner_factory: Callable[[str], TerraformRunner] = TerraformRunner
) -> FlatState:
    """
    Run acceptance test steps with GUARANTEED cleanup.

    Destroy always runs once Terraform was initialized, even when a step fails.

    Args:
        steps: Steps in execution order
        work_dir: Scratch directory (one subdirectory per working dir)
        check_destroy: Check run against the last applied state after destroy
        runner_factory: Builds a TerraformRunner for a directory (tests inject mocks)

    Returns:
        The last applied state

    Raises:
        AcceptanceTestError: If a step fails
        TerraformError: If a Terraform command fails
    """
    if not steps:
        raise AcceptanceTestError("At least one test step is required")

    base_dir = Path(work_dir)
    main_dir = base_dir / "main"
    main_dir.mkdir(parents=True, exist_ok=True)
    runner = runner_factory(str(main_dir))

    state: FlatState = {}
    last_config = ""
    initialized = False
    failed = True

    try:
        for index, step in enumerate(steps, start=1):
            logger.info(f"Running step {index}/{len(steps)}")

            if step.import_state:
                _run_import_step(index, step, last_config, state, base_dir, runner_factory)
                continue

            if not step.config:
                raise AcceptanceTestError("config is required for non-import steps", step=index)

            last_config = step.config
            _write_config(main_dir, step.config)
            runner.init()
            initialized = True
            state = _run_config_step(index, step, runner)
            logger.debug(f"State after step {index}:\n{dumps(state)}")
        failed = False
    finally:
        if initialized:
            _destroy(runner, step_failed=failed)

    if check_destroy is not None:
        try:
            check_destroy(state)
        except AssertionError as e:
            raise AcceptanceTestError(f"Check destroy failed: {e}") from e

    return state
