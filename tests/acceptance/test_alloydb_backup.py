"""
Live acceptance tests for google_alloydb_backup.

Each test creates an AlloyDB cluster, a primary instance and a backup, then
destroys everything. Expect 20+ minutes per test.
"""

import pytest
from googleapiclient.errors import HttpError

from tfgoogle.acctest import (
    TestStep,
    check_resource_attr,
    check_resource_attr_pair,
    check_resource_attr_set,
    compose_test_check_func,
    render_config,
    run_test,
)

pytestmark = pytest.mark.live

BACKUP = "google_alloydb_backup.default"

IMPORT_IGNORE = ["backup_id", "location", "reconciling", "update_time", "labels", "terraform_labels"]

NETWORK_CONFIG = """
resource "google_compute_global_address" "private_ip_alloc" {
  name          = "tf-test-alloydb-cluster{{ random_suffix }}"
  address_type  = "INTERNAL"
  purpose       = "VPC_PEERING"
  prefix_length = 16
  network       = google_compute_network.default.id
}

resource "google_service_networking_connection" "vpc_connection" {
  network                 = google_compute_network.default.id
  service                 = "servicenetworking.googleapis.com"
  reserved_peering_ranges = [google_compute_global_address.private_ip_alloc.name]
}

resource "google_compute_network" "default" {
  name = "tf-test-alloydb-network{{ random_suffix }}"
}
"""

CLUSTER_CONFIG = """
resource "google_alloydb_cluster" "default" {
  cluster_id = "tf-test-alloydb-cluster{{ random_suffix }}"
  location   = "us-central1"
  network_config {
    network = google_compute_network.default.id
  }

  deletion_protection = false
}

resource "google_alloydb_instance" "default" {
  cluster       = google_alloydb_cluster.default.name
  instance_id   = "tf-test-alloydb-instance{{ random_suffix }}"
  instance_type = "PRIMARY"

  depends_on = [google_service_networking_connection.vpc_connection]
}
""" + NETWORK_CONFIG

BACKUP_BASIC = """
resource "google_alloydb_backup" "default" {
  location     = "us-central1"
  backup_id    = "tf-test-alloydb-backup{{ random_suffix }}"
  cluster_name = google_alloydb_cluster.default.name

  description = "example description"
  labels = {
    "label" = "key"
  }

  depends_on = [google_alloydb_instance.default]
}
""" + CLUSTER_CONFIG

BACKUP_UPDATE = """
resource "google_alloydb_backup" "default" {
  location     = "us-central1"
  backup_id    = "tf-test-alloydb-backup{{ random_suffix }}"
  cluster_name = google_alloydb_cluster.default.name

  description = "example description"
  labels = {
    "label"  = "updated_key"
    "label2" = "updated_key2"
  }

  depends_on = [google_alloydb_instance.default]
}
""" + CLUSTER_CONFIG

BACKUP_MANDATORY_FIELDS = """
resource "google_alloydb_backup" "default" {
  location     = "us-central1"
  backup_id    = "tf-test-alloydb-backup{{ random_suffix }}"
  cluster_name = google_alloydb_cluster.default.name

  depends_on = [google_alloydb_instance.default]
}
""" + CLUSTER_CONFIG


def check_alloydb_backup_destroyed(provider_config):
    """Every backup from the last applied state must be gone from the AlloyDB API."""
    def _check(state):
        backups = provider_config.client("alloydb", "v1").projects().locations().backups()
        for address, attributes in state.items():
            if not address.startswith("google_alloydb_backup."):
                continue
            try:
                backups.get(name=attributes["name"]).execute()
            except HttpError as e:
                if e.resp.status == 404:
                    continue
                raise
            raise AssertionError(f"AlloyDB backup still exists: {attributes['name']}")
    return _check


def test_alloydb_backup_update(tmp_path, acc_project, provider_config, suffix):
    context = {"random_suffix": suffix}

    run_test(
        steps=[
            TestStep(
                config=render_config(BACKUP_BASIC, context),
                check=compose_test_check_func(
                    check_resource_attr(BACKUP, "labels.%", "1"),
                    check_resource_attr(BACKUP, "labels.label", "key"),
                    check_resource_attr_set(BACKUP, "uid"),
                    check_resource_attr_pair(BACKUP, "cluster_name", "google_alloydb_cluster.default", "name"),
                ),
            ),
            TestStep(
                resource_name=BACKUP,
                import_state=True,
                import_state_verify=True,
                import_state_verify_ignore=IMPORT_IGNORE,
            ),
            TestStep(
                config=render_config(BACKUP_UPDATE, context),
                check=compose_test_check_func(
                    check_resource_attr(BACKUP, "labels.%", "2"),
                    check_resource_attr(BACKUP, "labels.label2", "updated_key2"),
                    check_resource_attr(BACKUP, "description", "example description"),
                ),
            ),
            TestStep(
                resource_name=BACKUP,
                import_state=True,
                import_state_verify=True,
                import_state_verify_ignore=IMPORT_IGNORE,
            ),
        ],
        work_dir=str(tmp_path),
        check_destroy=check_alloydb_backup_destroyed(provider_config),
    )


def test_alloydb_backup_create_with_mandatory_fields(tmp_path, acc_project, provider_config, suffix):
    run_test(
        steps=[
            TestStep(
                config=render_config(BACKUP_MANDATORY_FIELDS, {"random_suffix": suffix}),
                check=check_resource_attr_set(BACKUP, "name"),
            ),
            TestStep(
                resource_name=BACKUP,
                import_state=True,
                import_state_verify=True,
                import_state_verify_ignore=IMPORT_IGNORE,
            ),
        ],
        work_dir=str(tmp_path),
        check_destroy=check_alloydb_backup_destroyed(provider_config),
    )
