"""Error taxonomy for devstrap.

Every error raised by the provisioning engine derives from
:class:`DevstrapError` and carries the process exit code the CLI
should terminate with.
"""


class DevstrapError(Exception):
    """Base exception for all devstrap errors.

    Attributes:
        exit_code: Process exit code associated with this error category.
    """

    exit_code: int = 1


class UsageError(DevstrapError):
    """Raised when the command line is used incorrectly."""

    exit_code = 2


class ConflictingIntentError(UsageError):
    """Raised when --replace is combined with --install or --purge."""

    def __init__(self, flags: list[str]) -> None:
        self.flags = flags
        super().__init__(f"Conflicting options: {', '.join(flags)} cannot be combined")


class PreconditionError(DevstrapError):
    """Base exception for failed up-front checks."""


class MissingToolError(PreconditionError):
    """Raised when one or more required external tools are not installed."""

    exit_code = 3

    def __init__(self, tools: list[str]) -> None:
        self.tools = list(tools)
        super().__init__(f"Required tools not found: {' '.join(self.tools)}")


class InsufficientPrivilegeError(PreconditionError):
    """Raised when the process does not run with root privileges."""

    exit_code = 4

    def __init__(self) -> None:
        super().__init__("This command must be run as root")


class UnsupportedDistributionError(PreconditionError):
    """Raised when the host distribution is not Debian or Ubuntu."""

    exit_code = 5

    def __init__(self, distributor: str) -> None:
        self.distributor = distributor
        super().__init__(f"Unsupported distribution: {distributor or 'unknown'}")


class TransportError(DevstrapError):
    """Raised when a key or archive download fails.

    Attributes:
        url: URL that could not be fetched.
        upstream_exit_code: Exit status of the transfer tool.
    """

    exit_code = 6

    def __init__(self, url: str, upstream_exit_code: int) -> None:
        self.url = url
        self.upstream_exit_code = upstream_exit_code
        super().__init__(f"Failed to fetch {url} (exit status {upstream_exit_code})")


class ResourceCreationFailed(DevstrapError):
    """Raised when a managed resource could not be brought into existence.

    Any partial artifact has already been removed when this is raised.

    Attributes:
        resource: Name of the resource.
        cause: Description of the underlying failure.
        upstream_exit_code: Exit status of the failing external step, if any.
    """

    exit_code = 6

    def __init__(self, resource: str, cause: str, upstream_exit_code: int | None = None) -> None:
        self.resource = resource
        self.cause = cause
        self.upstream_exit_code = upstream_exit_code
        super().__init__(f"Could not create {resource}: {cause}")


class ExternalCommandFailed(DevstrapError):
    """Raised when an external command (apt-get, make, ...) exits non-zero.

    Attributes:
        command: Short description of the command that failed.
        upstream_exit_code: Exit status of the command.
        stderr: Captured standard error, if any.
    """

    exit_code = 7

    def __init__(self, command: str, upstream_exit_code: int, stderr: str = "") -> None:
        self.command = command
        self.upstream_exit_code = upstream_exit_code
        self.stderr = stderr
        super().__init__(f"'{command}' failed with exit status {upstream_exit_code}")


class NoCompatibleVersion(DevstrapError):
    """Raised when two version sets share no common member."""

    exit_code = 8

    def __init__(self, set_a: list[int], set_b: list[int]) -> None:
        self.set_a = list(set_a)
        self.set_b = list(set_b)
        super().__init__(f"No compatible version between {self.set_a} and {self.set_b}")


class ConfigError(DevstrapError):
    """Base exception for configuration errors."""

    exit_code = 9


class ConfigParseError(ConfigError):
    """Raised when the configuration file is not valid TOML."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration content does not match the schema."""
