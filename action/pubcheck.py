#!/usr/bin/env python3
"""Pub Score Check — Publishing readiness audit for Dart/Flutter packages.

Runs the checks pub.dev scores a package on (documentation, static analysis,
formatting, dependency freshness, platform support) by shelling out to the
Flutter/Dart toolchain and scraping its console output.

Usage:
    python pubcheck.py /path/to/package
"""

import argparse
import re
import shlex
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

import yaml


# --- Configuration ---

@dataclass(frozen=True)
class AuditConfig:
    required_files: tuple[str, ...] = ("README.md", "LICENSE", "CONTRIBUTING.md")
    manifest_file: str = "pubspec.yaml"
    min_description_length: int = 60
    platforms: tuple[str, ...] = ("android", "ios", "web")
    helper_package: str = "will_it_run"
    source_extension: str = "dart"
    analyze_command: str = "flutter analyze"
    format_command: str = "dart format --output=none ."
    outdated_command: str = "dart pub outdated"
    add_helper_command: str = "dart pub add will_it_run"
    platform_command: str = "dart run will_it_run:{platform}"


DEFAULT_CONFIG = AuditConfig()


# --- Command runner ---

@dataclass(frozen=True)
class CommandResult:
    command: str
    returncode: int | None  # None when the process could not be started
    stdout: str = ""
    stderr: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def spawned(self) -> bool:
        return self.returncode is not None

    @property
    def output(self) -> str | None:
        """Text the checks consume: stdout on success, stderr on a non-zero exit.

        Returns None when the command could not be started at all.
        """
        if not self.spawned:
            return None
        if self.ok:
            return self.stdout
        return self.stderr


def run_command(command: str, cwd) -> CommandResult:
    """Run a shell-style command in cwd with stdin closed. Never raises."""
    try:
        args = shlex.split(command)
    except ValueError as exc:
        return CommandResult(command, None, error=str(exc))
    if not args:
        return CommandResult(command, None, error="empty command")

    # Resolves flutter.bat / dart.bat on Windows as well
    executable = shutil.which(args[0])
    if not executable:
        return CommandResult(command, None, error=f"{args[0]}: command not found")

    try:
        result = subprocess.run(
            [executable, *args[1:]], cwd=cwd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True, encoding="utf-8", errors="replace",
        )
    except OSError as exc:
        return CommandResult(command, None, error=str(exc))
    return CommandResult(
        command, result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )


# --- Output parsers ---

ISSUES_FOUND_RE = re.compile(r"(\d+) issues? found", re.IGNORECASE)
NOT_SUPPORTED_RE = re.compile(r"(\d+) packages doesn't support")
OUTDATED_MARKER = "*"


def count_analysis_issues(output: str) -> int:
    """Sum every '<N> issue(s) found' in analyzer output."""
    return sum(int(m.group(1)) for m in ISSUES_FOUND_RE.finditer(output))


def find_formatted_files(output: str, extension: str = "dart") -> list[str]:
    """Return the 'Changed <file>.<ext>' lines reported by a dry-run formatter."""
    pattern = r"Changed.*\." + re.escape(extension)
    return re.findall(pattern, output, re.IGNORECASE)


def count_outdated_packages(output: str) -> int:
    """Count rows of the outdated table flagged as upgradable."""
    count = 0
    for line in output.strip().splitlines():
        line = line.strip()
        if OUTDATED_MARKER not in line:
            continue
        count += 1
    return count


def count_unsupported_packages(output: str) -> int:
    """First '<N> packages doesn't support' count, or 0."""
    m = NOT_SUPPORTED_RE.search(output)
    if m:
        return int(m.group(1))
    return 0


# --- Checks ---

def read_manifest(path: Path) -> dict:
    """Load pubspec.yaml as a dict. Non-mapping documents become {}."""
    data = yaml.safe_load(path.read_text(encoding="utf-8", errors="replace"))
    if isinstance(data, dict):
        return data
    return {}


def check_documentation(directory, config: AuditConfig = DEFAULT_CONFIG) -> list[str]:
    """Return the required documentation files present in directory.

    Also reports whether the manifest description is long enough.
    """
    directory = Path(directory)
    found_files = [name for name in config.required_files if (directory / name).exists()]

    manifest_path = directory / config.manifest_file
    if manifest_path.exists():
        try:
            manifest = read_manifest(manifest_path)
        except (OSError, yaml.YAMLError) as exc:
            print(f"   Could not read {config.manifest_file}: {exc}")
            manifest = {}
        description = manifest.get("description") or ""
        if not isinstance(description, str):
            description = str(description)
        if len(description) > config.min_description_length:
            print(f"   Description key found in {config.manifest_file}.")
        else:
            print(f"   Could not find sufficient description found in {config.manifest_file}.")

    return found_files


def missing_documentation(found_files: list[str], config: AuditConfig = DEFAULT_CONFIG) -> list[str]:
    found = set(found_files)
    return [name for name in config.required_files if name not in found]


def check_format_and_analysis(directory, config: AuditConfig = DEFAULT_CONFIG) -> None:
    """Report analyzer issues and files the formatter would change."""
    analyze = run_command(config.analyze_command, directory).output
    if analyze is None:
        print(f"   Some error occurred while {config.analyze_command} command. "
              f"Run {config.analyze_command} command in your project to check for issues.")
    elif analyze == "":
        print(f"   Some error occurred while executing {config.analyze_command} command. "
              f"Run '{config.analyze_command}' command in your project to check for issues.")
    else:
        issue_count = count_analysis_issues(analyze)
        if issue_count > 0:
            print(f"   Found {issue_count} analysis issues.")
            print(f"   Run '{config.analyze_command}' command in your project to check for issues.")
        else:
            print(analyze)
            print("   No analysis issues found.")

    formatting = run_command(config.format_command, directory).output
    if formatting is None:
        return
    changed = find_formatted_files(formatting, config.source_extension)
    if changed:
        print(f"\n   {len(changed)} files needs to be formatted.")
        print("   Run 'dart format .' command in your project to get the files formatted.")
    else:
        print("   No files needed formatting.")


def check_dependencies(directory, config: AuditConfig = DEFAULT_CONFIG) -> None:
    """Report how many dependencies have newer versions available."""
    outdated = run_command(config.outdated_command, directory).output
    if outdated is None:
        return
    upgradable = count_outdated_packages(outdated)
    if upgradable > 0:
        print(f"   Found {upgradable} packages which can be updated.")
        print(f"   Run '{config.outdated_command}' command in your project to know more about these.")
    else:
        print("   All pub dependencies on respective latest versions.")


def helper_added(output: str, package: str) -> bool:
    """Whether 'dart pub add' output shows the helper package is available."""
    return (f"Add {package}: Resolving dependencies" in output
            or f'"{package}" is already in "dependencies"' in output)


def check_supported_platforms(directory, config: AuditConfig = DEFAULT_CONFIG) -> None:
    """Report packages that do not support each target platform."""
    result = run_command(config.add_helper_command, directory)
    if not result.spawned:
        print(f"   Could not run '{config.add_helper_command}': {result.error}")
        return
    added = result.output
    if not helper_added(added, config.helper_package):
        print(added)
        return

    for platform in config.platforms:
        command = config.platform_command.format(platform=platform)
        support = run_command(command, directory).output or ""
        not_supported = count_unsupported_packages(support)
        if not_supported > 0:
            print(f"   Found {not_supported} packages not supported for {platform}")
        else:
            print(f"   All packages are supported for {platform}")


# --- Report driver ---

def run_audit(directory, config: AuditConfig = DEFAULT_CONFIG) -> None:
    """Run the four report sections against directory, in order."""
    print("\nStarting analysis...")

    print("\n1. Checking required files and descriptions...")
    found_files = check_documentation(directory, config)
    print(f"   Found {len(found_files)} documentation files")
    missing = missing_documentation(found_files, config)
    if missing:
        print(f"   Missing documentation file(s): {', '.join(missing)}.")

    print("\n2. Analysing Flutter format and warnings...")
    check_format_and_analysis(directory, config)

    print("\n3. Analysing pubspec dependencies...")
    check_dependencies(directory, config)

    print("\n4. Analysing supported platforms...")
    check_supported_platforms(directory, config)

    print("\nAnalysis finished.")


# --- Main ---

def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    parser = argparse.ArgumentParser(
        prog="pubcheck",
        description="Pub Score Check: publishing readiness audit for Dart/Flutter packages",
        add_help=False,
    )
    parser.add_argument("directory", help="Path to the package")

    # Every token counts, option-like or not; the one token is the directory
    if len(argv) != 1:
        parser.print_usage(sys.stderr)
        sys.exit(1)

    run_audit(argv[0])


if __name__ == "__main__":
    main()
