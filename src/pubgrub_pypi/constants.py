"""Constants used in the project."""


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration defaults; not intended to provide behavior.
    """

    REGISTRY_URL_PYPI = "https://pypi.org/pypi/"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    PREFETCH_WORKERS = 4
    USER_AGENT = "pubgrub-pypi/0.1"
    HEADERS_JSON = {"Accept": "application/json"}

    # Environment variables
    ENV_CONFIG = "PUBGRUB_PYPI_CONFIG"
    ENV_LOG_LEVEL = "PUBGRUB_PYPI_LOG_LEVEL"
    ENV_INDEX_URL = "PUBGRUB_PYPI_INDEX_URL"
    ENV_TIMEOUT = "PUBGRUB_PYPI_TIMEOUT"
    ENV_RETRY_MAX = "PUBGRUB_PYPI_RETRY_MAX"
    ENV_PREFETCH_WORKERS = "PUBGRUB_PYPI_PREFETCH_WORKERS"
