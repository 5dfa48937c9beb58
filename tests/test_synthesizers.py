"""
Tests for command synthesizers — recipe selection, rendering, project tasks.
"""

from __future__ import annotations

from pathlib import Path

from devsetup.core.data import MANUAL, RECIPES
from devsetup.core.models.environment import Platform
from devsetup.core.models.plan import HandlerCategory, InstallAction, InstallationStep
from devsetup.core.services.synthesizers import (
    IDEToolSynthesizer,
    LanguageSynthesizer,
    PackageManagerSynthesizer,
    ProjectSynthesizer,
    VerificationSynthesizer,
)
from devsetup.core.services.synthesizers.base import normalize_arch, render
from devsetup.core.services.synthesizers.registry import default_registry


def _step(tool: str, action: InstallAction, category: HandlerCategory, version: str | None = None):
    return InstallationStep(id="step-1", category=category, action=action, tool=tool, version=version)


def _install(tool: str, category: HandlerCategory, version: str | None = None):
    return _step(tool, InstallAction.INSTALL, category, version)


# ── Rendering ───────────────────────────────────────────────────────


class TestRender:
    def test_version_is_verbatim(self):
        assert render("node@{version}", "18.17.0", "") == "node@18.17.0"
        assert render("python{version}", "3.12.1", "") == "python3.12.1"
        assert render("go{version}", "1.22.5", "") == "go1.22.5"

    def test_arch(self):
        assert render("linux-{arch}", None, "x86_64") == "linux-amd64"
        assert render("linux-{arch}", None, "aarch64") == "linux-arm64"

    def test_normalize_arch(self):
        assert normalize_arch("") == "amd64"
        assert normalize_arch("AMD64") == "amd64"
        assert normalize_arch("arm64") == "arm64"
        assert normalize_arch("riscv64") == "riscv64"


# ── Installers ──────────────────────────────────────────────────────


class TestRecipeInstall:
    """Install command selection per platform and package manager."""

    def test_git_on_mac_with_homebrew(self, mac_env):
        commands = IDEToolSynthesizer().plan(_install("git", HandlerCategory.IDE_TOOL), mac_env)
        assert [c.command for c in commands] == ["brew install git"]
        assert commands[0].requires_admin is False
        assert commands[0].platform == Platform.MACOS

    def test_docker_on_windows_with_chocolatey(self, windows_env):
        commands = IDEToolSynthesizer().plan(_install("docker", HandlerCategory.IDE_TOOL), windows_env)
        assert [c.command for c in commands] == ["choco install docker-desktop -y"]
        assert commands[0].requires_admin is True

    def test_python_on_linux_with_apt(self, linux_env):
        commands = LanguageSynthesizer().plan(
            _install("python", HandlerCategory.LANGUAGE, "3.12"), linux_env
        )
        assert len(commands) == 1
        assert commands[0].command == (
            "sudo apt-get update && sudo apt-get install -y python3.12 python3-pip"
        )
        assert commands[0].requires_admin is True

    def test_requested_version_is_used(self, mac_env):
        commands = LanguageSynthesizer().plan(_install("node", HandlerCategory.LANGUAGE, "18"), mac_env)
        assert commands[0].command == "brew install node@18"

    def test_full_version_reaches_the_command(self, mac_env, linux_env):
        node = LanguageSynthesizer().plan(_install("node", HandlerCategory.LANGUAGE, "18.17.0"), mac_env)
        assert node[0].command == "brew install node@18.17.0"

        python = LanguageSynthesizer().plan(_install("python", HandlerCategory.LANGUAGE, "3.12.1"), linux_env)
        assert "python3.12.1" in python[0].command

    def test_ruby_pinned_on_chocolatey(self, windows_env):
        commands = LanguageSynthesizer().plan(_install("ruby", HandlerCategory.LANGUAGE, "3.2.4"), windows_env)
        assert [c.command for c in commands] == ["choco install ruby --version=3.2.4 -y"]

    def test_go_tarball_even_with_apt(self, linux_env):
        commands = LanguageSynthesizer().plan(_install("go", HandlerCategory.LANGUAGE, "1.21.13"), linux_env)
        assert "go1.21.13.linux-amd64.tar.gz" in commands[0].command

    def test_every_versioned_method_names_the_version(self):
        for family, recipe in RECIPES.items():
            if "default_version" not in recipe:
                continue
            for platform, chain in recipe["install"].items():
                for method, steps in chain:
                    if method == MANUAL:
                        continue
                    assert any("{version}" in s["command"] for s in steps), (family, platform, method)

    def test_default_version_when_unspecified(self, mac_env):
        commands = LanguageSynthesizer().plan(_install("node", HandlerCategory.LANGUAGE), mac_env)
        assert commands[0].command == "brew install node@20"

    def test_falls_back_to_script_without_manager(self, make_env):
        env = make_env(Platform.MACOS)
        commands = LanguageSynthesizer().plan(_install("node", HandlerCategory.LANGUAGE, "20"), env)
        assert "nvm-sh/nvm" in commands[0].command
        assert commands[1].command == "source ~/.nvm/nvm.sh && nvm install 20"

    def test_falls_back_to_download_page(self, make_env):
        env = make_env(Platform.WINDOWS)
        commands = LanguageSynthesizer().plan(_install("python", HandlerCategory.LANGUAGE), env)
        assert len(commands) == 1
        assert "https://www.python.org/downloads/" in commands[0].command
        assert commands[0].command.endswith("start https://www.python.org/downloads/")

    def test_winget_used_when_chocolatey_missing(self, make_env):
        env = make_env(Platform.WINDOWS, managers=("winget",))
        commands = IDEToolSynthesizer().plan(_install("git", HandlerCategory.IDE_TOOL), env)
        assert [c.command for c in commands] == ["winget install -e --id Git.Git"]

    def test_arch_rendered_into_tarball(self, make_env):
        env = make_env(Platform.LINUX, architecture="aarch64")
        commands = LanguageSynthesizer().plan(_install("go", HandlerCategory.LANGUAGE), env)
        assert "go1.22.5.linux-arm64.tar.gz" in commands[0].command

    def test_package_manager_install(self, make_env):
        env = make_env(Platform.MACOS)
        commands = PackageManagerSynthesizer().plan(
            _install("homebrew", HandlerCategory.PACKAGE_MANAGER), env
        )
        assert "Homebrew/install" in commands[0].command

    def test_unknown_tool_has_no_commands(self, mac_env):
        step = _install("intellij", HandlerCategory.IDE_TOOL)
        assert IDEToolSynthesizer().plan(step, mac_env) == []
        assert IDEToolSynthesizer().execute(step, mac_env).output == (
            "No known setup for intellij; nothing to do"
        )


class TestSkipInstalled:
    """The skip-installed policy on install commands."""

    def test_off_by_default_reinstalls(self, make_env):
        env = make_env(Platform.MACOS, managers=("homebrew",), installed={"git": "2.43.0"})
        commands = IDEToolSynthesizer().plan(_install("git", HandlerCategory.IDE_TOOL), env)
        assert [c.command for c in commands] == ["brew install git"]

    def test_on_skips_present_tool(self, make_env):
        env = make_env(Platform.MACOS, managers=("homebrew",), installed={"git": "2.43.0"})
        synth = IDEToolSynthesizer(skip_installed=True)
        assert synth.plan(_install("git", HandlerCategory.IDE_TOOL), env) == []

    def test_on_skips_present_manager(self, mac_env):
        synth = PackageManagerSynthesizer(skip_installed=True)
        assert synth.plan(_install("brew", HandlerCategory.PACKAGE_MANAGER), mac_env) == []


# ── Detection and verification ──────────────────────────────────────


class TestDetectAndVerify:
    def test_detect_is_never_elevated(self, windows_env):
        step = _step("docker", InstallAction.DETECT, HandlerCategory.IDE_TOOL)
        commands = IDEToolSynthesizer().plan(step, windows_env)
        assert [c.command for c in commands] == ["docker --version"]
        assert commands[0].requires_admin is False

    def test_python_detect_differs_on_windows(self, windows_env, linux_env):
        step = _step("python", InstallAction.DETECT, HandlerCategory.LANGUAGE)
        assert LanguageSynthesizer().plan(step, windows_env)[0].command == "python --version"
        assert LanguageSynthesizer().plan(step, linux_env)[0].command == "python3 --version"

    def test_verify_is_compound(self, linux_env):
        step = _step("node", InstallAction.VERIFY, HandlerCategory.VERIFICATION)
        commands = VerificationSynthesizer().plan(step, linux_env)
        assert [c.command for c in commands] == ["node --version && npm --version"]

    def test_verify_python_on_windows(self, windows_env):
        step = _step("python", InstallAction.VERIFY, HandlerCategory.VERIFICATION)
        commands = VerificationSynthesizer().plan(step, windows_env)
        assert commands[0].command == "python --version && pip --version"

    def test_verify_unknown_tool_is_empty(self, linux_env):
        step = _step("intellij", InstallAction.VERIFY, HandlerCategory.VERIFICATION)
        assert VerificationSynthesizer().plan(step, linux_env) == []

    def test_verify_project_task_is_empty(self, linux_env):
        step = _step("clone", InstallAction.VERIFY, HandlerCategory.VERIFICATION)
        step.tool_category = HandlerCategory.PROJECT
        assert VerificationSynthesizer().plan(step, linux_env) == []

    def test_verify_tool_named_like_project_task(self, linux_env):
        step = _step("python-dotenv", InstallAction.VERIFY, HandlerCategory.VERIFICATION)
        step.tool_category = HandlerCategory.LANGUAGE
        commands = VerificationSynthesizer().plan(step, linux_env)
        assert [c.command for c in commands] == ["python3 --version && pip3 --version"]

    def test_language_detect_reports_presence(self, make_env):
        env = make_env(Platform.LINUX, installed={"node": "20.11.1"})
        step = _step("node", InstallAction.DETECT, HandlerCategory.LANGUAGE)
        result = LanguageSynthesizer().execute(step, env)
        assert result.success is True
        assert result.output == "Node.js is already installed (20.11.1)"

    def test_language_detect_reports_absence(self, linux_env):
        step = _step("java", InstallAction.DETECT, HandlerCategory.LANGUAGE)
        assert LanguageSynthesizer().execute(step, linux_env).output == "Java is not installed"


# ── Project tasks ───────────────────────────────────────────────────


class TestProjectSynthesizer:
    """Manifest-driven dependency install, clone and env file."""

    def test_dependencies_from_manifests(self, tmp_path: Path, linux_env):
        (tmp_path / "package.json").write_text("{}")
        (tmp_path / "requirements.txt").write_text("flask\n")
        synth = ProjectSynthesizer(project_root=tmp_path)

        commands = synth.plan(_install("dependencies", HandlerCategory.PROJECT), linux_env)
        assert [c.command for c in commands] == [
            f'cd "{tmp_path}" && npm install',
            f'cd "{tmp_path}" && pip install -r requirements.txt',
        ]
        assert not any(c.requires_admin for c in commands)

    def test_windows_uses_cd_d(self, tmp_path: Path, windows_env):
        (tmp_path / "go.mod").write_text("module x\n")
        synth = ProjectSynthesizer(project_root=tmp_path)
        commands = synth.plan(_install("dependencies", HandlerCategory.PROJECT), windows_env)
        assert commands[0].command == f'cd /d "{tmp_path}" && go mod download'

    def test_no_root_no_commands(self, linux_env):
        synth = ProjectSynthesizer()
        assert synth.plan(_install("dependencies", HandlerCategory.PROJECT), linux_env) == []

    def test_clone_needs_url(self, linux_env):
        synth = ProjectSynthesizer()
        assert synth.plan(_install("clone", HandlerCategory.PROJECT), linux_env) == []

        step = _install("clone", HandlerCategory.PROJECT, "https://github.com/acme/app.git")
        commands = synth.plan(step, linux_env)
        assert [c.command for c in commands] == ["git clone https://github.com/acme/app.git"]

    def test_env_file_seeded_from_example(self, tmp_path: Path, linux_env):
        (tmp_path / ".env.example").write_text("A=1\n")
        synth = ProjectSynthesizer(project_root=tmp_path)
        commands = synth.plan(_install("env", HandlerCategory.PROJECT), linux_env)
        assert commands[0].command == f'cd "{tmp_path}" && cp .env.example .env'

    def test_existing_env_file_left_alone(self, tmp_path: Path, linux_env):
        (tmp_path / ".env.example").write_text("A=1\n")
        (tmp_path / ".env").write_text("A=2\n")
        synth = ProjectSynthesizer(project_root=tmp_path)
        assert synth.plan(_install("env", HandlerCategory.PROJECT), linux_env) == []

    def test_detect_reports_manifests(self, tmp_path: Path, linux_env):
        (tmp_path / "Cargo.toml").write_text("[package]\n")
        synth = ProjectSynthesizer(project_root=tmp_path)
        step = _step("setup", InstallAction.DETECT, HandlerCategory.PROJECT)
        assert synth.execute(step, linux_env).output == "Found project manifests: Cargo.toml"


# ── Registry ────────────────────────────────────────────────────────


class TestRegistry:
    def test_default_registry_covers_every_category(self):
        registry = default_registry()
        assert sorted(registry.list_categories()) == sorted(c.value for c in HandlerCategory)

    def test_for_step(self):
        registry = default_registry()
        step = _install("node", HandlerCategory.LANGUAGE)
        assert isinstance(registry.for_step(step), LanguageSynthesizer)

    def test_register_overwrites(self):
        registry = default_registry()
        replacement = LanguageSynthesizer(skip_installed=True)
        registry.register(replacement)
        assert registry.get(HandlerCategory.LANGUAGE) is replacement
