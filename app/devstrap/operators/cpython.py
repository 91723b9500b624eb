"""CPython native build operator.

Drives ``./configure`` and ``make`` for an extracted CPython source tree
using a versioned Clang/LLVM toolchain.
"""

import logging
import os
from pathlib import Path

from devstrap.core.errors import ExternalCommandFailed, MissingToolError
from devstrap.utils.shell import command_path, run_command

logger = logging.getLogger(__name__)

# Toolchain variables passed to ./configure, keyed by versioned binary name
_TOOLCHAIN: dict[str, str] = {
    "CC": "clang-{version}",
    "CPP": "clang-cpp-{version}",
    "CXX": "clang++-{version}",
    "LLVM_AR": "llvm-ar-{version}",
    "LLVM_PROFDATA": "llvm-profdata-{version}",
}


class CPythonBuilder:
    """Configures, builds, tests and installs a CPython source tree."""

    # PGO builds run the test suite twice; give them hours, not minutes
    _BUILD_TIMEOUT: float = 4 * 3600.0

    def toolchain(self, version: int) -> dict[str, str]:
        """Resolve the versioned toolchain binaries to absolute paths.

        Args:
            version: Clang/LLVM major version.

        Returns:
            Mapping of configure variable to absolute binary path.

        Raises:
            MissingToolError: Listing every binary that is not installed.
        """
        resolved: dict[str, str] = {}
        missing: list[str] = []
        for variable, template in _TOOLCHAIN.items():
            binary = template.format(version=version)
            path = command_path(binary)
            if path is None:
                missing.append(binary)
            else:
                resolved[variable] = path
        if missing:
            raise MissingToolError(missing)
        return resolved

    def configure_args(self, version: int, prefix: Path, debug: bool) -> list[str]:
        """Build the ./configure command line.

        Args:
            version: Clang/LLVM major version.
            prefix: Installation prefix.
            debug: Whether to add --with-pydebug.
        """
        args = ["./configure"]
        args.extend(f"{var}={path}" for var, path in self.toolchain(version).items())
        args.extend(
            [
                "CFLAGS=-std=c11",
                f"--prefix={prefix}",
                f"--exec-prefix={prefix}",
                "--with-ensurepip=upgrade",
                "--enable-optimizations",
                "--with-lto=thin",
            ]
        )
        if debug:
            args.append("--with-pydebug")
        return args

    def configure(self, source_dir: Path, version: int, prefix: Path, debug: bool) -> None:
        """Run ./configure in ``source_dir``."""
        self._run(self.configure_args(version, prefix, debug), source_dir, "configure")

    def build(self, source_dir: Path) -> None:
        """Compile with one job per CPU."""
        jobs = os.cpu_count() or 1
        self._run(["make", "--silent", f"--jobs={jobs}"], source_dir, "make")

    def test(self, source_dir: Path) -> None:
        """Run the interpreter's test suite."""
        self._run(["make", "--silent", "test"], source_dir, "make test")

    def altinstall(self, source_dir: Path) -> None:
        """Install without overwriting the unversioned ``python3`` link."""
        self._run(["make", "--silent", "altinstall"], source_dir, "make altinstall")

    def _run(self, args: list[str], cwd: Path, description: str) -> None:
        logger.info("Running %s in %s", description, cwd)
        result = run_command(args, timeout=self._BUILD_TIMEOUT, cwd=str(cwd))
        if not result.success:
            raise ExternalCommandFailed(description, result.returncode, result.stderr.strip())
