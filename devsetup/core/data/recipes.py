"""
Tool recipes — how to detect, install and verify each tool family.

Pure data, no logic. The synthesizers read this table; nothing else
interprets it.

Per family:
    label            human name
    binary           executable the prober and locator look for
    default_version  used when the request names no version, so runs
                     stay reproducible instead of tracking "latest"
    detect           read-only version probe, keyed by platform or "_default"
    verify           compound check (runtime && companion), same keying
    install          per platform, an ordered fallback chain of
                     (method, steps). ``method`` is a package manager name
                     (taken only when the prober saw it installed),
                     ``_script`` (always available) or ``_manual``
                     (message plus download page, the last resort).

Command templates may use ``{version}`` and ``{arch}``. The version is
injected verbatim, never shortened, so every non-manual method of a
versioned family names it. Templates must not contain other literal braces.
"""

from __future__ import annotations

from devsetup.core.models.environment import Platform
from devsetup.core.services.classifier import ToolFamily

MACOS = Platform.MACOS
WINDOWS = Platform.WINDOWS
LINUX = Platform.LINUX

# Architecture name normalization (Go/Docker-style release asset names).
ARCH_MAP: dict[str, str] = {
    "x86_64": "amd64",
    "AMD64": "amd64",      # Windows
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",      # macOS (Darwin reports arm64)
    "ARM64": "arm64",
}

# Methods that are not package managers.
SCRIPT = "_script"
MANUAL = "_manual"


def _step(command: str, label: str, sudo: bool = False) -> dict:
    return {"command": command, "sudo": sudo, "label": label}


def _open_page(platform: Platform, label: str, url: str) -> list[dict]:
    """Last-resort action: tell the operator where to download from."""
    opener = {MACOS: "open", WINDOWS: "start", LINUX: "xdg-open"}[platform]
    return [
        _step(
            f'echo "Please download {label} from {url}" && {opener} {url}',
            f"Open {label} download page",
        ),
    ]


def _unsupported(label: str, platform_name: str, hint: str) -> list[dict]:
    return [_step(f'echo "{label} is not available on {platform_name}. {hint}"', f"Explain {label} availability")]


def _go_tarball(os_name: str) -> dict:
    archive = f"go{{version}}.{os_name}-{{arch}}.tar.gz"
    return _step(
        f"curl -fsSLO https://go.dev/dl/{archive} && sudo tar -C /usr/local -xzf {archive}",
        "Install Go from the official tarball",
        sudo=True,
    )


_NVM_STEPS = [
    _step(
        "curl -o- https://raw.githubusercontent.com/nvm-sh/nvm/v0.39.7/install.sh | bash",
        "Install NVM (Node Version Manager)",
    ),
    _step("source ~/.nvm/nvm.sh && nvm install {version}", "Install Node.js via NVM"),
]
_RUSTUP_INSTALL = (
    "curl --proto '=https' --tlsv1.2 -sSf https://sh.rustup.rs"
    " | sh -s -- -y --default-toolchain {version}"
)
_RUSTUP_TOOLCHAIN = "rustup toolchain install {version} && rustup default {version}"
_BREW_INSTALL = (
    '/bin/bash -c "$(curl -fsSL https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'
)
_CHOCO_INSTALL = (
    "Set-ExecutionPolicy Bypass -Scope Process -Force; "
    "[System.Net.ServicePointManager]::SecurityProtocol = "
    "[System.Net.ServicePointManager]::SecurityProtocol -bor 3072; "
    "iex ((New-Object System.Net.WebClient).DownloadString('https://community.chocolatey.org/install.ps1'))"
)


RECIPES: dict[ToolFamily, dict] = {

    # ── Languages ───────────────────────────────────────────────

    ToolFamily.NODE: {
        "label": "Node.js",
        "binary": "node",
        "default_version": "20",
        "detect": {"_default": "node --version"},
        "verify": {"_default": "node --version && npm --version"},
        "install": {
            MACOS: [
                ("homebrew", [_step("brew install node@{version}", "Install Node.js via Homebrew")]),
                (SCRIPT, _NVM_STEPS),
            ],
            WINDOWS: [
                ("chocolatey", [_step("choco install nodejs --version={version} -y", "Install Node.js via Chocolatey", sudo=True)]),
                ("winget", [_step("winget install -e --id OpenJS.NodeJS --version {version}", "Install Node.js via winget")]),
                (MANUAL, _open_page(WINDOWS, "Node.js", "https://nodejs.org/en/download/")),
            ],
            # NodeSource repositories only track major lines; nvm takes any version.
            LINUX: [
                (SCRIPT, _NVM_STEPS),
            ],
        },
    },

    ToolFamily.PYTHON: {
        "label": "Python",
        "binary": "python3",
        "default_version": "3.11",
        "detect": {WINDOWS: "python --version", "_default": "python3 --version"},
        "verify": {WINDOWS: "python --version && pip --version", "_default": "python3 --version && pip3 --version"},
        "install": {
            MACOS: [
                ("homebrew", [_step("brew install python@{version}", "Install Python via Homebrew")]),
                (MANUAL, _open_page(MACOS, "Python", "https://www.python.org/downloads/")),
            ],
            WINDOWS: [
                ("chocolatey", [_step("choco install python --version={version} -y", "Install Python via Chocolatey", sudo=True)]),
                ("winget", [_step("winget install -e --id Python.Python.{version}", "Install Python via winget")]),
                (MANUAL, _open_page(WINDOWS, "Python", "https://www.python.org/downloads/")),
            ],
            LINUX: [
                ("apt", [_step("sudo apt-get update && sudo apt-get install -y python{version} python3-pip", "Install Python via apt", sudo=True)]),
                ("yum", [_step("sudo yum install -y python{version} python3-pip", "Install Python via yum", sudo=True)]),
                ("homebrew", [_step("brew install python@{version}", "Install Python via Homebrew")]),
                (MANUAL, _open_page(LINUX, "Python", "https://www.python.org/downloads/")),
            ],
        },
    },

    ToolFamily.JAVA: {
        "label": "Java",
        "binary": "java",
        "default_version": "17",
        "detect": {"_default": "java --version"},
        "verify": {"_default": "java --version && javac --version"},
        "install": {
            MACOS: [
                ("homebrew", [_step("brew install openjdk@{version}", "Install OpenJDK via Homebrew")]),
                (MANUAL, _open_page(MACOS, "Java", "https://adoptium.net/")),
            ],
            WINDOWS: [
                ("chocolatey", [_step("choco install temurin{version} -y", "Install OpenJDK via Chocolatey", sudo=True)]),
                ("winget", [_step("winget install -e --id EclipseAdoptium.Temurin.{version}.JDK", "Install OpenJDK via winget")]),
                (MANUAL, _open_page(WINDOWS, "Java", "https://adoptium.net/")),
            ],
            LINUX: [
                ("apt", [_step("sudo apt-get update && sudo apt-get install -y openjdk-{version}-jdk", "Install OpenJDK via apt", sudo=True)]),
                ("yum", [_step("sudo yum install -y java-{version}-openjdk-devel", "Install OpenJDK via yum", sudo=True)]),
                ("homebrew", [_step("brew install openjdk@{version}", "Install OpenJDK via Homebrew")]),
                (MANUAL, _open_page(LINUX, "Java", "https://adoptium.net/")),
            ],
        },
    },

    ToolFamily.RUBY: {
        "label": "Ruby",
        "binary": "ruby",
        "default_version": "3.3",
        "detect": {"_default": "ruby --version"},
        "verify": {"_default": "ruby --version && gem --version"},
        "install": {
            MACOS: [
                ("homebrew", [_step("brew install ruby@{version}", "Install Ruby via Homebrew")]),
                (MANUAL, _open_page(MACOS, "Ruby", "https://www.ruby-lang.org/en/downloads/")),
            ],
            WINDOWS: [
                ("chocolatey", [_step("choco install ruby --version={version} -y", "Install Ruby via Chocolatey", sudo=True)]),
                ("winget", [_step("winget install -e --id RubyInstallerTeam.Ruby.{version}", "Install Ruby via winget")]),
                (MANUAL, _open_page(WINDOWS, "Ruby", "https://rubyinstaller.org/downloads/")),
            ],
            LINUX: [
                ("apt", [_step("sudo apt-get update && sudo apt-get install -y ruby{version} ruby{version}-dev", "Install Ruby via apt", sudo=True)]),
                ("yum", [_step("sudo yum module install -y ruby:{version}", "Install Ruby via yum", sudo=True)]),
                ("homebrew", [_step("brew install ruby@{version}", "Install Ruby via Homebrew")]),
                (MANUAL, _open_page(LINUX, "Ruby", "https://www.ruby-lang.org/en/downloads/")),
            ],
        },
    },

    # Distribution Go packages lag behind; the release tarball pins the exact version.
    ToolFamily.GO: {
        "label": "Go",
        "binary": "go",
        "default_version": "1.22.5",
        "detect": {"_default": "go version"},
        "verify": {"_default": "go version && go env GOPATH"},
        "install": {
            MACOS: [
                (SCRIPT, [_go_tarball("darwin")]),
            ],
            WINDOWS: [
                ("chocolatey", [_step("choco install golang --version={version} -y", "Install Go via Chocolatey", sudo=True)]),
                ("winget", [_step("winget install -e --id GoLang.Go --version {version}", "Install Go via winget")]),
                (MANUAL, _open_page(WINDOWS, "Go", "https://go.dev/dl/")),
            ],
            LINUX: [
                (SCRIPT, [_go_tarball("linux")]),
            ],
        },
    },

    ToolFamily.RUST: {
        "label": "Rust",
        "binary": "rustc",
        "default_version": "1.79.0",
        "detect": {"_default": "rustc --version"},
        "verify": {"_default": "rustc --version && cargo --version"},
        "install": {
            MACOS: [
                ("homebrew", [_step("brew install rustup && rustup-init -y --default-toolchain {version}", "Install Rust via Homebrew rustup")]),
                (SCRIPT, [_step(_RUSTUP_INSTALL, "Install Rust via rustup")]),
            ],
            WINDOWS: [
                ("chocolatey", [
                    _step("choco install rustup.install -y", "Install rustup via Chocolatey", sudo=True),
                    _step(_RUSTUP_TOOLCHAIN, "Install the Rust toolchain"),
                ]),
                ("winget", [
                    _step("winget install -e --id Rustlang.Rustup", "Install rustup via winget"),
                    _step(_RUSTUP_TOOLCHAIN, "Install the Rust toolchain"),
                ]),
                (MANUAL, _open_page(WINDOWS, "Rust", "https://rustup.rs/")),
            ],
            LINUX: [
                (SCRIPT, [_step(_RUSTUP_INSTALL, "Install Rust via rustup")]),
            ],
        },
    },

    ToolFamily.PHP: {
        "label": "PHP",
        "binary": "php",
        "default_version": "8.3",
        "detect": {"_default": "php --version"},
        "verify": {"_default": "php --version && composer --version"},
        "install": {
            MACOS: [
                ("homebrew", [_step("brew install php@{version}", "Install PHP via Homebrew")]),
                (MANUAL, _open_page(MACOS, "PHP", "https://www.php.net/downloads")),
            ],
            WINDOWS: [
                ("chocolatey", [_step("choco install php --version={version} -y", "Install PHP via Chocolatey", sudo=True)]),
                (MANUAL, _open_page(WINDOWS, "PHP", "https://windows.php.net/download/")),
            ],
            LINUX: [
                ("apt", [_step("sudo apt-get update && sudo apt-get install -y php{version}-cli", "Install PHP via apt", sudo=True)]),
                ("yum", [_step("sudo yum module install -y php:{version}", "Install PHP via yum", sudo=True)]),
                ("homebrew", [_step("brew install php@{version}", "Install PHP via Homebrew")]),
                (MANUAL, _open_page(LINUX, "PHP", "https://www.php.net/downloads")),
            ],
        },
    },

    # ── Package managers ────────────────────────────────────────

    ToolFamily.HOMEBREW: {
        "label": "Homebrew",
        "binary": "brew",
        "detect": {"_default": "brew --version"},
        "verify": {"_default": "brew --version && brew config"},
        "install": {
            MACOS: [(SCRIPT, [_step(_BREW_INSTALL, "Install Homebrew")])],
            LINUX: [(SCRIPT, [_step(_BREW_INSTALL, "Install Homebrew")])],
            WINDOWS: [(MANUAL, _unsupported("Homebrew", "Windows", "Use Chocolatey or winget instead."))],
        },
    },

    ToolFamily.CHOCOLATEY: {
        "label": "Chocolatey",
        "binary": "choco",
        "detect": {"_default": "choco --version"},
        "verify": {"_default": "choco --version && choco config list"},
        "install": {
            WINDOWS: [(SCRIPT, [_step(_CHOCO_INSTALL, "Install Chocolatey", sudo=True)])],
            MACOS: [(MANUAL, _unsupported("Chocolatey", "macOS", "Use Homebrew instead."))],
            LINUX: [(MANUAL, _unsupported("Chocolatey", "Linux", "Use the distribution package manager instead."))],
        },
    },

    ToolFamily.WINGET: {
        "label": "winget",
        "binary": "winget",
        "detect": {"_default": "winget --version"},
        "verify": {"_default": "winget --version && winget source list"},
        "install": {
            WINDOWS: [(MANUAL, [_step(
                'echo "winget ships with App Installer from the Microsoft Store"'
                " && start ms-windows-store://pdp/?productid=9NBLGGH4NNS1",
                "Open App Installer in the Microsoft Store",
            )])],
            MACOS: [(MANUAL, _unsupported("winget", "macOS", "Use Homebrew instead."))],
            LINUX: [(MANUAL, _unsupported("winget", "Linux", "Use the distribution package manager instead."))],
        },
    },

    ToolFamily.APT: {
        "label": "apt",
        "binary": "apt",
        "detect": {"_default": "apt --version"},
        "verify": {"_default": "apt --version && apt-get --version"},
        "install": {
            LINUX: [(MANUAL, [_step(
                'echo "apt ships with Debian-based distributions and cannot be installed separately"',
                "Explain apt availability",
            )])],
            MACOS: [(MANUAL, _unsupported("apt", "macOS", "Use Homebrew instead."))],
            WINDOWS: [(MANUAL, _unsupported("apt", "Windows", "Use Chocolatey or winget instead."))],
        },
    },

    ToolFamily.YUM: {
        "label": "yum",
        "binary": "yum",
        "detect": {"_default": "yum --version"},
        "verify": {"_default": "yum --version && yum repolist"},
        "install": {
            LINUX: [(MANUAL, [_step(
                'echo "yum ships with RHEL-based distributions and cannot be installed separately"',
                "Explain yum availability",
            )])],
            MACOS: [(MANUAL, _unsupported("yum", "macOS", "Use Homebrew instead."))],
            WINDOWS: [(MANUAL, _unsupported("yum", "Windows", "Use Chocolatey or winget instead."))],
        },
    },

    # ── Dev tools ───────────────────────────────────────────────

    ToolFamily.DOCKER: {
        "label": "Docker",
        "binary": "docker",
        "detect": {"_default": "docker --version"},
        "verify": {"_default": "docker --version && docker compose version"},
        "install": {
            MACOS: [
                ("homebrew", [_step("brew install --cask docker", "Install Docker Desktop via Homebrew")]),
                (MANUAL, _open_page(MACOS, "Docker Desktop", "https://www.docker.com/products/docker-desktop/")),
            ],
            WINDOWS: [
                ("chocolatey", [_step("choco install docker-desktop -y", "Install Docker Desktop via Chocolatey", sudo=True)]),
                ("winget", [_step("winget install -e --id Docker.DockerDesktop", "Install Docker Desktop via winget")]),
                (MANUAL, _open_page(WINDOWS, "Docker Desktop", "https://www.docker.com/products/docker-desktop/")),
            ],
            LINUX: [
                ("apt", [_step("sudo apt-get update && sudo apt-get install -y docker.io", "Install Docker via apt", sudo=True)]),
                ("yum", [_step("sudo yum install -y docker", "Install Docker via yum", sudo=True)]),
                (SCRIPT, [_step(
                    "curl -fsSL https://get.docker.com -o get-docker.sh && sudo sh get-docker.sh",
                    "Install Docker via official script",
                    sudo=True,
                )]),
            ],
        },
    },

    ToolFamily.GIT: {
        "label": "Git",
        "binary": "git",
        "detect": {"_default": "git --version"},
        "verify": {"_default": "git --version && git --exec-path"},
        "install": {
            MACOS: [
                ("homebrew", [_step("brew install git", "Install Git via Homebrew")]),
                (SCRIPT, [_step("xcode-select --install", "Install Xcode Command Line Tools (includes Git)")]),
            ],
            WINDOWS: [
                ("chocolatey", [_step("choco install git -y", "Install Git via Chocolatey", sudo=True)]),
                ("winget", [_step("winget install -e --id Git.Git", "Install Git via winget")]),
                (MANUAL, _open_page(WINDOWS, "Git", "https://git-scm.com/download/win")),
            ],
            LINUX: [
                ("apt", [_step("sudo apt-get install -y git", "Install Git via apt", sudo=True)]),
                ("yum", [_step("sudo yum install -y git", "Install Git via yum", sudo=True)]),
                ("homebrew", [_step("brew install git", "Install Git via Homebrew")]),
                (MANUAL, _open_page(LINUX, "Git", "https://git-scm.com/download/linux")),
            ],
        },
    },

    ToolFamily.VSCODE: {
        "label": "Visual Studio Code",
        "binary": "code",
        "detect": {"_default": "code --version"},
        "verify": {"_default": "code --version && code --list-extensions"},
        "install": {
            MACOS: [
                ("homebrew", [_step("brew install --cask visual-studio-code", "Install VS Code via Homebrew")]),
                (MANUAL, _open_page(MACOS, "Visual Studio Code", "https://code.visualstudio.com/download")),
            ],
            WINDOWS: [
                ("chocolatey", [_step("choco install vscode -y", "Install VS Code via Chocolatey", sudo=True)]),
                ("winget", [_step("winget install -e --id Microsoft.VisualStudioCode", "Install VS Code via winget")]),
                (MANUAL, _open_page(WINDOWS, "Visual Studio Code", "https://code.visualstudio.com/download")),
            ],
            LINUX: [
                (SCRIPT, [_step("sudo snap install code --classic", "Install VS Code via snap", sudo=True)]),
            ],
        },
    },

    # Homebrew formulae for these track the latest release only.
    ToolFamily.KUBECTL: {
        "label": "kubectl",
        "binary": "kubectl",
        "default_version": "1.30.2",
        "detect": {"_default": "kubectl version --client"},
        "verify": {"_default": "kubectl version --client && kubectl config view"},
        "install": {
            MACOS: [
                (SCRIPT, [_step(
                    'curl -LO "https://dl.k8s.io/release/v{version}/bin/darwin/{arch}/kubectl"'
                    " && chmod +x kubectl && sudo mv kubectl /usr/local/bin/kubectl",
                    "Install kubectl binary",
                    sudo=True,
                )]),
            ],
            WINDOWS: [
                ("chocolatey", [_step("choco install kubernetes-cli --version={version} -y", "Install kubectl via Chocolatey", sudo=True)]),
                ("winget", [_step("winget install -e --id Kubernetes.kubectl --version {version}", "Install kubectl via winget")]),
                (MANUAL, _open_page(WINDOWS, "kubectl", "https://kubernetes.io/docs/tasks/tools/install-kubectl-windows/")),
            ],
            LINUX: [
                (SCRIPT, [_step(
                    'curl -LO "https://dl.k8s.io/release/v{version}/bin/linux/{arch}/kubectl"'
                    " && sudo install -o root -g root -m 0755 kubectl /usr/local/bin/kubectl",
                    "Install kubectl binary",
                    sudo=True,
                )]),
            ],
        },
    },

    ToolFamily.TERRAFORM: {
        "label": "Terraform",
        "binary": "terraform",
        "default_version": "1.8.5",
        "detect": {"_default": "terraform version"},
        "verify": {"_default": "terraform version && terraform -help"},
        "install": {
            MACOS: [
                (SCRIPT, [_step(
                    "curl -fsSLO https://releases.hashicorp.com/terraform/{version}/terraform_{version}_darwin_{arch}.zip"
                    " && unzip -o terraform_{version}_darwin_{arch}.zip terraform"
                    " && sudo mv terraform /usr/local/bin/terraform",
                    "Install Terraform binary",
                    sudo=True,
                )]),
            ],
            WINDOWS: [
                ("chocolatey", [_step("choco install terraform --version={version} -y", "Install Terraform via Chocolatey", sudo=True)]),
                ("winget", [_step("winget install -e --id Hashicorp.Terraform --version {version}", "Install Terraform via winget")]),
                (MANUAL, _open_page(WINDOWS, "Terraform", "https://developer.hashicorp.com/terraform/install")),
            ],
            LINUX: [
                (SCRIPT, [_step(
                    "curl -fsSLO https://releases.hashicorp.com/terraform/{version}/terraform_{version}_linux_{arch}.zip"
                    " && unzip -o terraform_{version}_linux_{arch}.zip terraform"
                    " && sudo mv terraform /usr/local/bin/terraform",
                    "Install Terraform binary",
                    sudo=True,
                )]),
            ],
        },
    },
}
