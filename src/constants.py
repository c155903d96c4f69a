"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    USAGE_ERROR = 1


class IssueStates(Enum):
    """Issue states accepted by the GitHub issues listing."""

    OPEN = "open"
    CLOSED = "closed"
    ALL = "all"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_PYPI = "https://pypi.org/pypi/"
    PYPI_PROJECT_URL = "https://pypi.org/project/"
    REGISTRY_URL_PACKAGIST = "https://repo.packagist.org/p2/"
    GITHUB_API_BASE = "https://api.github.com"
    GITHUB_TRENDING_URL = "https://github.com/trending"
    GITHUB_WEB_BASE = "https://github.com"
    ISSUE_STATES = [state.value for state in IssueStates]

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "METAPKG_LOG_LEVEL"
    ENV_CONFIG = "METAPKG_CONFIG"
    ENV_HOME = "METAPKG_HOME"
    ENV_GITHUB_TOKEN = "GITHUB_TOKEN"

    META_DIR_NAME = ".metapkg"
    USER_AGENT = "MetaPkg-Python"
    GITHUB_ACCEPT = "application/vnd.github+json"

    REQUEST_TIMEOUT = 30  # Timeout in seconds for JSON API requests
    DOWNLOAD_TIMEOUT = 60  # Timeout in seconds for artifact downloads
    DOWNLOAD_CHUNK_SIZE = 64 * 1024

    GITHUB_PER_PAGE_MAX = 100
    SEARCH_RESULTS = 10
    ISSUE_LIST_DEFAULT = 30
    COMMENTS_LIMIT = 50
    CRAWL_TOPIC_DEFAULT = 50
    CRAWL_TOPIC_MAX = 100
    WEB_CRAWL_TOPIC_RESULTS = 20

    # Characters replaced with "_" when building cache paths
    UNSAFE_PATH_CHARS = '\\/:"*?<>|'

    # Composer requirements that are platform constraints rather than packages
    COMPOSER_PLATFORM_PACKAGES = ("php",)
    COMPOSER_PLATFORM_PREFIXES = ("ext-",)

    WEB_HOST = "127.0.0.1"
    WEB_PORT = 8000
