"""Wizard orchestrator module.

Provides the three-step wizard controller with:
- Step constants and the transition table
- Generation actions (vision analysis, scripts, scene prompts)
- Back/reset navigation and in-flight guards
"""

from adreel.orchestrator.state import WizardStep
from adreel.orchestrator.wizard import Wizard

__all__ = ["Wizard", "WizardStep"]
