"""Package models for dpkg selections and versioned package names."""

from dataclasses import dataclass, field

# dpkg --get-selections state for packages selected for installation
SELECTION_INSTALL = "install"


@dataclass(frozen=True, slots=True)
class PackageSelection:
    """Represents one line of the dpkg selection database.

    Attributes:
        name: Package name (e.g., 'clang-18', 'libc6:amd64').
        state: Selection state ('install', 'hold', 'deinstall', 'purge').
        base: Package name with any numeric major-version suffix removed.
        version: Integer major-version suffix (e.g., 18 for 'clang-18').
    """

    name: str
    state: str
    base: str = field(default="")
    version: int | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate selection data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if not self.state:
            msg = "Selection state cannot be empty"
            raise ValueError(msg)

    @property
    def is_installed(self) -> bool:
        """Check if the package is selected for installation."""
        return self.state == SELECTION_INSTALL


@dataclass(frozen=True, slots=True)
class PackageSpec:
    """A package base name plus a version suffix bound at resolution time.

    Attributes:
        base: Unversioned package name (e.g., 'clang').
        version: Major version suffix, or None while unresolved.
    """

    base: str
    version: int | None = None

    def __post_init__(self) -> None:
        """Validate spec data after initialization."""
        if not self.base:
            msg = "Package base name cannot be empty"
            raise ValueError(msg)

    @property
    def resolved(self) -> bool:
        """Check if a version has been bound."""
        return self.version is not None

    @property
    def resolved_name(self) -> str:
        """Return the installable package name, e.g. 'clang-18'.

        Raises:
            ValueError: If no version has been bound yet.
        """
        if self.version is None:
            msg = f"Package '{self.base}' has no resolved version"
            raise ValueError(msg)
        return f"{self.base}-{self.version}"

    def bind(self, version: int) -> "PackageSpec":
        """Return a copy of this spec with ``version`` bound."""
        return PackageSpec(base=self.base, version=version)
