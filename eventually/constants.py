"""Engine defaults."""

DEFAULT_TIMEOUT_S = 4.0
DEFAULT_POLL_S = 0.2

DEFAULT_REPORTS_DIR = ".eventually/artifacts"
