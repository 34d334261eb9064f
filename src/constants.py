"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    EXIT_WARNINGS = 3


class LifecycleEvents(Enum):
    """Lifecycle hooks the plugin can subscribe to.

    Args:
        Enum (string): Event names as dispatched by the host.
    """

    PRE_INSTALL_CMD = "pre-install-cmd"
    PRE_UPDATE_CMD = "pre-update-cmd"
    PRE_DEPENDENCIES_SOLVING = "pre-dependencies-solving"


class RewriteOutcome(Enum):
    """Outcome recorded for an eligible requirement.

    Args:
        Enum (string): Outcome of a single rewrite decision.
    """

    SWITCHED = "switched"
    FELL_BACK = "fell_back"
    NO_MATCH = "no_match"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    EXTRA_REPOSITORIES_KEY = "feature-branch-repositories"
    EXTRA_FALLBACKS_KEY = "feature-branch-fallbacks"
    MANIFEST_FILE = "composer.json"
    ENV_ROOT_VERSION = "COMPOSER_ROOT_VERSION"
    ENV_LOG_LEVEL = "FEATUREBRANCH_LOG_LEVEL"
    DEFAULT_ROOT_VERSION = "1.0.0+no-version-set"
    EVENT_CHOICES = {
        "install": LifecycleEvents.PRE_INSTALL_CMD,
        "update": LifecycleEvents.PRE_UPDATE_CMD,
        "solve": LifecycleEvents.PRE_DEPENDENCIES_SOLVING,
    }
    OUTPUT_FORMATS = ["text", "json"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    GIT_TIMEOUT = 10

    # Repository API constants
    REPOSITORY_URL_DEFAULT = "https://repo.packagist.org"
    REPOSITORY_METADATA_PATH = "p2"
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300
