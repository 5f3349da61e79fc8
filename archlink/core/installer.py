"""
Package installer for archlink.

Installs a selected package with pacman, falling back to the AUR helpers
found on the system.
"""

import logging
import shutil
import subprocess
from typing import Dict, List, Optional, Sequence, Tuple

from archlink.core.exceptions import InstallError
from archlink.core.interfaces import PackageSource


logger = logging.getLogger(__name__)


class PackageInstaller:
    """
    Installs packages through pacman or an AUR helper.

    Official (or unknown) packages are tried with ``sudo pacman -S`` first;
    every installed AUR helper is tried afterwards in order.
    """

    PACMAN_COMMAND = ("sudo", "pacman", "-S")
    AUR_HELPERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
        ("yay", ("-S",)),
        ("paru", ("-S",)),
    )

    def __init__(self, noconfirm: bool = True):
        """
        Initialize the installer.

        Args:
            noconfirm: Pass --noconfirm to pacman
        """
        self.noconfirm = noconfirm
        self._checked_commands: Dict[str, bool] = {}

    def check_command_availability(self, command: str) -> bool:
        """
        Check whether a command is on PATH. Results are cached.
        """
        if command not in self._checked_commands:
            self._checked_commands[command] = shutil.which(command) is not None
            if not self._checked_commands[command]:
                logger.debug(f"Command not found: {command}")
        return self._checked_commands[command]

    def build_commands(self, package: str, source: Optional[PackageSource]) -> List[Tuple[str, List[str]]]:
        """
        List the (tool, argv) pairs to try for a package, in order.

        Args:
            package: Package name
            source: Catalog the package came from, None when unknown

        Returns:
            Commands to attempt
        """
        commands = []

        if source in (PackageSource.OFFICIAL, None):
            argv = list(self.PACMAN_COMMAND) + [package]
            if self.noconfirm:
                argv.append("--noconfirm")
            commands.append(("pacman", argv))

        for helper, args in self.AUR_HELPERS:
            if self.check_command_availability(helper):
                commands.append((helper, [helper] + list(args) + [package]))

        return commands

    def install(self, package: str, source: Optional[PackageSource] = None) -> str:
        """
        Install a package.

        Args:
            package: Package name
            source: Catalog the package came from, None when unknown

        Returns:
            Name of the tool that installed the package

        Raises:
            InstallError: If every attempt failed or no tool was available
        """
        attempted: List[str] = []

        for tool, argv in self.build_commands(package, source):
            attempted.append(tool)
            logger.info(f"Trying '{' '.join(argv)}'")
            if self._run(tool, argv):
                logger.info(f"Installed '{package}' with {tool}")
                return tool
            logger.warning(f"{tool} failed to install '{package}'")

        tried = ", ".join(attempted) if attempted else "nothing"
        raise InstallError(
            f"Failed to install '{package}'. Attempted: {tried}. "
            f"Install yay/paru or check package name."
        )

    def _run(self, tool: str, argv: Sequence[str]) -> bool:
        try:
            completed = subprocess.run(list(argv), check=False)
        except OSError as e:
            logger.warning(f"Failed to run {tool}: {e}")
            return False
        return completed.returncode == 0
