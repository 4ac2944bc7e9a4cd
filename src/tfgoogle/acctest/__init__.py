"""
Acceptance-test tooling: Terraform CLI runner, state flattening, checks and steps.
"""

from .checks import (
    check_no_resource_attr,
    check_resource_attr,
    check_resource_attr_pair,
    check_resource_attr_set,
    compose_test_check_func,
)
from .harness import (
    TestStep,
    acc_test_enabled,
    acc_test_pre_check,
    diff_attributes,
    random_suffix,
    render_config,
    run_test,
)
from .state import flatten_attributes, flatten_state, resource_attributes
from .terraform_runner import TerraformError, TerraformRunner

__all__ = [
    "TerraformError",
    "TerraformRunner",
    "TestStep",
    "acc_test_enabled",
    "acc_test_pre_check",
    "check_no_resource_attr",
    "check_resource_attr",
    "check_resource_attr_pair",
    "check_resource_attr_set",
    "compose_test_check_func",
    "diff_attributes",
    "flatten_attributes",
    "flatten_state",
    "random_suffix",
    "render_config",
    "resource_attributes",
    "run_test",
]
