# ==========================================
# 1. Configuration Filenames
# ==========================================
CONFIG_CREDENTIALS_FILE = "config_credentials.json"
CONFIG_GCP_SECTION = "gcp"

# Keys inside the "gcp" section of config_credentials.json
CONFIG_GCP_KEYS = {
    "project": "gcp_project_id",
    "region": "gcp_region",
    "zone": "gcp_zone",
    "credentials": "gcp_credentials_file",
    "access_token": "gcp_access_token",
}

# ==========================================
# 2. Environment Variables
# ==========================================
# First non-empty variable wins, same lookup order as the Terraform provider.
PROJECT_ENV_VARS = ["GOOGLE_PROJECT", "GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT", "CLOUDSDK_CORE_PROJECT"]
REGION_ENV_VARS = ["GOOGLE_REGION", "GCLOUD_REGION", "CLOUDSDK_COMPUTE_REGION"]
ZONE_ENV_VARS = ["GOOGLE_ZONE", "GCLOUD_ZONE", "CLOUDSDK_COMPUTE_ZONE"]
CREDENTIALS_ENV_VARS = ["GOOGLE_CREDENTIALS", "GOOGLE_CLOUD_KEYFILE_JSON", "GCLOUD_KEYFILE_JSON"]
ACCESS_TOKEN_ENV_VARS = ["GOOGLE_OAUTH_ACCESS_TOKEN"]

TF_ACC_ENV_VAR = "TF_ACC"
TF_LOG_ENV_VAR = "TF_LOG"

# ==========================================
# 3. Google API Settings
# ==========================================
DEFAULT_SCOPES = [
    "https://www.googleapis.com/auth/cloud-platform",
    "https://www.googleapis.com/auth/userinfo.email",
]
COMPUTE_API_NAME = "compute"
COMPUTE_API_VERSION = "v1"

# ==========================================
# 4. Examples & Documentation
# ==========================================
EXAMPLE_TEMPLATE_SUFFIX = ".tf.j2"
TEST_RESOURCE_PREFIX = "tf-test-"
DOC_PROJECT_PLACEHOLDER = "my-project-name"
DOCS_DATA_SOURCE_DIR = "d"
DOCS_FILE_SUFFIX = ".html.markdown"

# Id segment used when a list data source is read without a filter
ALL_FILTER_ID = "ALL"

# ==========================================
# 5. Acceptance Tests
# ==========================================
RANDOM_SUFFIX_LENGTH = 10
TERRAFORM_CONFIG_FILE = "main.tf"
