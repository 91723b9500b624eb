"""Pydantic models for the devstrap configuration file.

The configuration replaces the hard-coded constants at the top of each
bootstrap. Every section has complete defaults, so an empty or missing
file is valid.
"""

from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BUILD_DEPENDENCIES: list[str] = [
    "python3",
    "build-essential",
    "gdb",
    "lcov",
    "pkg-config",
    "libbz2-dev",
    "libffi-dev",
    "libgdbm-dev",
    "libgdbm-compat-dev",
    "liblzma-dev",
    "libncurses5-dev",
    "libreadline6-dev",
    "libsqlite3-dev",
    "libssl-dev",
    "lzma",
    "lzma-dev",
    "tk-dev",
    "uuid-dev",
    "zlib1g-dev",
    "libmpdec-dev",
]


class LlvmConfig(BaseModel):
    """Settings for the LLVM repository and toolchain packages.

    Attributes:
        version: LLVM major version to install.
        packages: Unversioned package names; each is suffixed with the version.
        base_url: Root of the LLVM APT archive.
        key_path: Path of the signing key below ``base_url``.
        keyring_dir: Directory holding dearmored keyrings.
        keyring_name: File name of the dearmored LLVM keyring.
        sources_dir: Directory of APT source-list fragments.
        source_file: File name of the LLVM source-list fragment.
        components: Repository components.
    """

    model_config = ConfigDict(extra="forbid")

    version: Annotated[int, Field(ge=1, description="LLVM major version")] = 18
    packages: Annotated[
        list[str],
        Field(default_factory=lambda: ["clang", "lldb", "lld"], description="Managed packages"),
    ]
    base_url: Annotated[str, Field(description="LLVM APT archive URL")] = "https://apt.llvm.org"
    key_path: Annotated[str, Field(description="Signing key path")] = "/llvm-snapshot.gpg.key"
    keyring_dir: Annotated[Path, Field(description="Keyring directory")] = Path(
        "/usr/share/keyrings"
    )
    keyring_name: Annotated[str, Field(description="Keyring file name")] = "llvm.gpg"
    sources_dir: Annotated[Path, Field(description="Source-list directory")] = Path(
        "/etc/apt/sources.list.d"
    )
    source_file: Annotated[str, Field(description="Source-list file name")] = "llvm.list"
    components: Annotated[str, Field(description="Repository components")] = "main"

    @field_validator("packages")
    @classmethod
    def validate_packages(cls, v: list[str]) -> list[str]:
        """Require a non-empty list of plain package names."""
        if not v:
            msg = "At least one package must be managed"
            raise ValueError(msg)
        for name in v:
            if not name or not name.replace("+", "").replace("-", "").isalnum():
                msg = f"Invalid package name: {name!r}"
                raise ValueError(msg)
        return v

    @property
    def keyring_path(self) -> Path:
        """Absolute path of the dearmored keyring."""
        return self.keyring_dir / self.keyring_name

    @property
    def source_list_path(self) -> Path:
        """Absolute path of the source-list fragment."""
        return self.sources_dir / self.source_file

    @property
    def key_url(self) -> str:
        """Full URL of the armored signing key."""
        return f"{self.base_url.rstrip('/')}{self.key_path}"


class PythonConfig(BaseModel):
    """Settings for building CPython from source.

    Attributes:
        version: CPython release to build (e.g., "3.13.0").
        prefix: Installation prefix for ``make altinstall``.
        source_list: Primary APT source list holding the deb-src entry.
        base_url: Root of the python.org source archive.
        build_dependencies: First entry is fed to ``apt-get build-dep``;
            the rest are installed individually.
        environment: Build environment; anything other than production or
            test produces a debug build.
        work_dir: Directory the source archive is downloaded into.
    """

    model_config = ConfigDict(extra="forbid")

    version: Annotated[str, Field(description="CPython release")] = "3.13.0"
    prefix: Annotated[Path, Field(description="Installation prefix")] = Path("/usr/local")
    source_list: Annotated[Path, Field(description="Primary APT source list")] = Path(
        "/etc/apt/sources.list"
    )
    base_url: Annotated[str, Field(description="Source archive URL")] = (
        "https://www.python.org/ftp/python"
    )
    build_dependencies: Annotated[
        list[str],
        Field(
            default_factory=lambda: list(DEFAULT_BUILD_DEPENDENCIES),
            description="Build dependencies",
        ),
    ]
    environment: Annotated[str, Field(description="Build environment")] = "development"
    work_dir: Annotated[Path, Field(description="Download directory")] = Path("/tmp")

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Require a MAJOR.MINOR.PATCH release number."""
        parts = v.split(".")
        if len(parts) != 3 or not all(part.isdigit() for part in parts):
            msg = f"Python version must look like 3.13.0, got {v!r}"
            raise ValueError(msg)
        return v

    @field_validator("prefix")
    @classmethod
    def validate_prefix(cls, v: Path) -> Path:
        """Refuse prefixes owned by the distribution's own Python."""
        if v in (Path("/"), Path("/usr")):
            msg = f"Refusing to install into system prefix {v}"
            raise ValueError(msg)
        return v

    @field_validator("build_dependencies")
    @classmethod
    def validate_build_dependencies(cls, v: list[str]) -> list[str]:
        """Require at least the build-dep seed package."""
        if not v:
            msg = "build_dependencies must name at least one package"
            raise ValueError(msg)
        return v

    @property
    def archive_name(self) -> str:
        """File name of the gzip-compressed source tarball."""
        return f"Python-{self.version}.tgz"

    @property
    def archive_url(self) -> str:
        """Full URL of the source tarball."""
        return f"{self.base_url.rstrip('/')}/{self.version}/{self.archive_name}"

    @property
    def minor_version(self) -> str:
        """MAJOR.MINOR part of the release, as used by altinstall names."""
        major, minor, _ = self.version.split(".")
        return f"{major}.{minor}"

    @property
    def debug_build(self) -> bool:
        """Check if the build should be configured with --with-pydebug."""
        return self.environment not in ("production", "test")


class DevstrapConfig(BaseModel):
    """Complete devstrap configuration.

    Attributes:
        llvm: LLVM repository and toolchain settings.
        python: CPython source build settings.
    """

    model_config = ConfigDict(extra="forbid")

    llvm: Annotated[LlvmConfig, Field(default_factory=LlvmConfig, description="LLVM settings")]
    python: Annotated[
        PythonConfig, Field(default_factory=PythonConfig, description="Python build settings")
    ]
