"""
Unit tests for the acceptance test harness.

A MagicMock stands in for TerraformRunner; run_test is driven through its
runner_factory argument.
"""

import pytest
from unittest.mock import MagicMock

from tfgoogle.acctest.checks import check_resource_attr
from tfgoogle.acctest.harness import (
    TestStep,
    acc_test_enabled,
    acc_test_pre_check,
    diff_attributes,
    random_suffix,
    render_config,
    run_test,
)
from tfgoogle.acctest.terraform_runner import TerraformError
from tfgoogle.core.exceptions import AcceptanceTestError, TemplateRenderError

ADDR = "google_alloydb_backup.default"
CONFIG = 'resource "google_alloydb_backup" "default" {}\n'


def _show_json(attributes):
    return {"values": {"root_module": {"resources": [{"address": ADDR, "values": attributes}]}}}


APPLIED = _show_json({"id": "projects/p/locations/l/backups/b", "state": "READY", "timeouts": None, "location": "l"})


class FakeRunners:
    """Runner factory recording one MagicMock per working directory."""

    def __init__(self, main_state=APPLIED, import_state=APPLIED, pending=False):
        self.runners = {}
        self.main_state = main_state
        self.import_state = import_state
        self.pending = pending

    def __call__(self, working_dir):
        runner = MagicMock(name=working_dir)
        runner.plan.return_value = f"{working_dir}/tfplan"
        runner.has_pending_changes.return_value = self.pending
        runner.plan_output.return_value = "~ update in-place"
        is_import = working_dir.rsplit("/", 1)[-1].startswith("import-")
        runner.show_state.return_value = self.import_state if is_import else self.main_state
        self.runners[working_dir] = runner
        return runner

    def main(self, tmp_path):
        return self.runners[str(tmp_path / "main")]


class TestHelpers:

    def test_acc_test_enabled(self):
        assert acc_test_enabled({"TF_ACC": "1"}) is True
        assert acc_test_enabled({"TF_ACC": ""}) is False
        assert acc_test_enabled({}) is False

    def test_pre_check_returns_project(self):
        assert acc_test_pre_check({"GOOGLE_CLOUD_PROJECT": "acc"}) == "acc"

    def test_pre_check_without_project(self):
        with pytest.raises(AcceptanceTestError, match="GOOGLE_PROJECT"):
            acc_test_pre_check({})

    def test_random_suffix(self):
        suffix = random_suffix()

        assert len(suffix) == 10
        assert suffix.isalnum() and suffix == suffix.lower()

    def test_render_config(self):
        assert render_config('name = "tf-test-{{ suffix }}"', {"suffix": "abc"}) == 'name = "tf-test-abc"'

    def test_render_config_undefined(self):
        with pytest.raises(TemplateRenderError, match="acceptance test config"):
            render_config("{{ suffix }}", {})


class TestDiffAttributes:

    def test_equal(self):
        assert diff_attributes({"a": "1"}, {"a": "1"}, []) == []

    def test_differences_sorted(self):
        assert diff_attributes({"b": "1", "a": "x"}, {"b": "2"}, []) == [("a", "x", None), ("b", "1", "2")]

    def test_ignore_prefixes(self):
        expected = {"labels.%": "1", "labels.a": "b", "location": "l", "name": "n"}
        actual = {"name": "n"}

        assert diff_attributes(expected, actual, ["labels", "location"]) == []

    def test_timeouts_always_ignored(self):
        assert diff_attributes({"timeouts.create": "10m"}, {}, []) == []

    def test_zero_count_equals_missing(self):
        assert diff_attributes({"tags.#": "0"}, {}, []) == []


class TestRunTest:

    def test_requires_steps(self, tmp_path):
        with pytest.raises(AcceptanceTestError, match="At least one test step"):
            run_test([], str(tmp_path))

    def test_config_step_applies_checks_and_destroys(self, tmp_path):
        factory = FakeRunners()

        state = run_test(
            [TestStep(config=CONFIG, check=check_resource_attr(ADDR, "state", "READY"))],
            str(tmp_path),
            runner_factory=factory,
        )

        runner = factory.main(tmp_path)
        assert (tmp_path / "main" / "main.tf").read_text() == CONFIG
        runner.init.assert_called_once()
        runner.apply.assert_called_once_with(plan_file=str(tmp_path / "main") + "/tfplan")
        runner.destroy.assert_called_once()
        assert state[ADDR]["state"] == "READY"

    def test_failed_check_still_destroys(self, tmp_path):
        factory = FakeRunners()

        with pytest.raises(AcceptanceTestError) as exc:
            run_test(
                [TestStep(config=CONFIG, check=check_resource_attr(ADDR, "state", "CREATING"))],
                str(tmp_path),
                runner_factory=factory,
            )

        assert exc.value.step == 1
        assert "Check failed" in str(exc.value)
        factory.main(tmp_path).destroy.assert_called_once()

    def test_non_empty_plan_after_apply_fails(self, tmp_path):
        factory = FakeRunners(pending=True)

        with pytest.raises(AcceptanceTestError, match="the plan was not empty"):
            run_test([TestStep(config=CONFIG)], str(tmp_path), runner_factory=factory)

        factory.main(tmp_path).destroy.assert_called_once()

    def test_expect_non_empty_plan(self, tmp_path):
        factory = FakeRunners(pending=True)

        run_test([TestStep(config=CONFIG, expect_non_empty_plan=True)], str(tmp_path), runner_factory=factory)

    def test_plan_only_does_not_apply(self, tmp_path):
        factory = FakeRunners(main_state={})

        run_test([TestStep(config=CONFIG, plan_only=True)], str(tmp_path), runner_factory=factory)

        runner = factory.main(tmp_path)
        runner.validate.assert_called_once()
        runner.apply.assert_not_called()

    def test_plan_only_expected_changes_missing(self, tmp_path):
        factory = FakeRunners(main_state={})

        with pytest.raises(AcceptanceTestError, match="Expected a non-empty plan"):
            run_test(
                [TestStep(config=CONFIG, plan_only=True, expect_non_empty_plan=True)],
                str(tmp_path),
                runner_factory=factory,
            )

    def test_import_verify(self, tmp_path):
        factory = FakeRunners(import_state=_show_json({
            "id": "projects/p/locations/l/backups/b", "state": "READY", "location": None,
        }))

        run_test(
            [
                TestStep(config=CONFIG),
                TestStep(resource_name=ADDR, import_state=True, import_state_verify=True,
                         import_state_verify_ignore=["location"]),
            ],
            str(tmp_path),
            runner_factory=factory,
        )

        import_runner = factory.runners[str(tmp_path / "import-2")]
        import_runner.import_resource.assert_called_once_with(ADDR, "projects/p/locations/l/backups/b")
        import_runner.destroy.assert_not_called()
        assert (tmp_path / "import-2" / "main.tf").read_text() == CONFIG

    def test_import_verify_mismatch(self, tmp_path):
        factory = FakeRunners(import_state=_show_json({"id": "projects/p/locations/l/backups/b", "state": "CREATING"}))

        with pytest.raises(AcceptanceTestError) as exc:
            run_test(
                [
                    TestStep(config=CONFIG),
                    TestStep(resource_name=ADDR, import_state=True, import_state_verify=True),
                ],
                str(tmp_path),
                runner_factory=factory,
            )

        assert exc.value.step == 2
        assert "state: state='READY' imported='CREATING'" in str(exc.value)
        assert "location: state='l' imported=None" in str(exc.value)
        factory.main(tmp_path).destroy.assert_called_once()

    def test_import_uses_explicit_id(self, tmp_path):
        factory = FakeRunners()

        run_test(
            [TestStep(config=CONFIG), TestStep(resource_name=ADDR, import_state=True, import_state_id="b")],
            str(tmp_path),
            runner_factory=factory,
        )

        factory.runners[str(tmp_path / "import-2")].import_resource.assert_called_once_with(ADDR, "b")

    def test_import_without_config_step(self, tmp_path):
        factory = FakeRunners()

        with pytest.raises(AcceptanceTestError, match="preceding config step"):
            run_test([TestStep(resource_name=ADDR, import_state=True)], str(tmp_path), runner_factory=factory)

        factory.main(tmp_path).destroy.assert_not_called()

    def test_check_destroy_runs_after_destroy(self, tmp_path):
        factory = FakeRunners()
        seen = []

        def _check_destroy(state):
            factory.main(tmp_path).destroy.assert_called_once()
            seen.append(sorted(state))

        run_test([TestStep(config=CONFIG)], str(tmp_path), check_destroy=_check_destroy, runner_factory=factory)

        assert seen == [[ADDR]]

    def test_check_destroy_failure(self, tmp_path):
        def _check_destroy(state):
            raise AssertionError("backup still exists")

        with pytest.raises(AcceptanceTestError, match="Check destroy failed: backup still exists"):
            run_test([TestStep(config=CONFIG)], str(tmp_path), check_destroy=_check_destroy,
                     runner_factory=FakeRunners())

    def test_destroy_error_does_not_hide_step_failure(self, tmp_path):
        factory = FakeRunners()

        def _factory(working_dir):
            runner = factory(working_dir)
            runner.destroy.side_effect = TerraformError("destroy", 1, "Error: resource in use")
            return runner

        with pytest.raises(AcceptanceTestError, match="Check failed"):
            run_test(
                [TestStep(config=CONFIG, check=check_resource_attr(ADDR, "state", "CREATING"))],
                str(tmp_path),
                runner_factory=_factory,
            )

        factory.main(tmp_path).destroy.assert_called_once()

    def test_destroy_error_raised_after_successful_steps(self, tmp_path):
        factory = FakeRunners()

        def _factory(working_dir):
            runner = factory(working_dir)
            runner.destroy.side_effect = TerraformError("destroy", 1, "Error: resource in use")
            return runner

        with pytest.raises(TerraformError, match="resource in use"):
            run_test([TestStep(config=CONFIG)], str(tmp_path), runner_factory=_factory)

    def test_check_outputs_receives_root_outputs(self, tmp_path):
        factory = FakeRunners()
        seen = []

        run_test(
            [TestStep(config=CONFIG, check_outputs=seen.append)],
            str(tmp_path),
            runner_factory=factory,
        )

        assert seen == [factory.main(tmp_path).output.return_value]

    def test_check_outputs_failure(self, tmp_path):
        factory = FakeRunners()

        def _check_outputs(outputs):
            raise AssertionError("usable_subnetworks missing")

        with pytest.raises(AcceptanceTestError, match="Output check failed: usable_subnetworks missing"):
            run_test([TestStep(config=CONFIG, check_outputs=_check_outputs)], str(tmp_path), runner_factory=factory)

        factory.main(tmp_path).destroy.assert_called_once()

    def test_outputs_not_read_without_check(self, tmp_path):
        factory = FakeRunners()

        run_test([TestStep(config=CONFIG)], str(tmp_path), runner_factory=factory)

        factory.main(tmp_path).output.assert_not_called()
