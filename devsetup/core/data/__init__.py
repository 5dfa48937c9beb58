"""
Static data — ``__init__.py`` re-exports the recipe table.
"""

from devsetup.core.data.recipes import (  # noqa: F401
    ARCH_MAP,
    MANUAL,
    RECIPES,
    SCRIPT,
)
