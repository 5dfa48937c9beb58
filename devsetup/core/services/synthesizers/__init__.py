"""Command synthesizers — one per handler category."""

from devsetup.core.services.synthesizers.base import Synthesizer
from devsetup.core.services.synthesizers.ide_tool import IDEToolSynthesizer
from devsetup.core.services.synthesizers.language import LanguageSynthesizer
from devsetup.core.services.synthesizers.package_manager import PackageManagerSynthesizer
from devsetup.core.services.synthesizers.project import ProjectSynthesizer
from devsetup.core.services.synthesizers.registry import SynthesizerRegistry, default_registry
from devsetup.core.services.synthesizers.verification import VerificationSynthesizer

__all__ = [
    "IDEToolSynthesizer",
    "LanguageSynthesizer",
    "PackageManagerSynthesizer",
    "ProjectSynthesizer",
    "Synthesizer",
    "SynthesizerRegistry",
    "VerificationSynthesizer",
    "default_registry",
]
