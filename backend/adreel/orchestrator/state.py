"""Wizard step constants and transition table.

The wizard has three steps; every allowed move between them is listed in
WIZARD_TRANSITIONS keyed by (step, action).  Failed generation actions
leave the step unchanged and are therefore not listed.
"""

from enum import IntEnum
from typing import Dict, Tuple


class WizardStep(IntEnum):
    CONFIGURING = 1
    CHOOSING_SCRIPT = 2
    VIEWING_RESULT = 3

    @property
    def label(self) -> str:
        return WIZARD_STEPS[self]


WIZARD_STEPS: Dict[WizardStep, str] = {
    WizardStep.CONFIGURING: "configuring",
    WizardStep.CHOOSING_SCRIPT: "choosing-script",
    WizardStep.VIEWING_RESULT: "viewing-result",
}

# (current step, action) -> next step, for successful actions
WIZARD_TRANSITIONS: Dict[Tuple[WizardStep, str], WizardStep] = {
    (WizardStep.CONFIGURING, "generate_scripts"): WizardStep.CHOOSING_SCRIPT,
    # Regenerating from the gallery replaces the list and stays there
    (WizardStep.CHOOSING_SCRIPT, "generate_scripts"): WizardStep.CHOOSING_SCRIPT,
    (WizardStep.CHOOSING_SCRIPT, "generate_prompts"): WizardStep.VIEWING_RESULT,
    (WizardStep.VIEWING_RESULT, "back"): WizardStep.CHOOSING_SCRIPT,
    (WizardStep.VIEWING_RESULT, "reset"): WizardStep.CONFIGURING,
    (WizardStep.CHOOSING_SCRIPT, "reset"): WizardStep.CONFIGURING,
}


def can_transition(step: WizardStep, action: str) -> bool:
    """Check whether ``action`` is allowed from ``step``."""
    return (step, action) in WIZARD_TRANSITIONS


def next_step(step: WizardStep, action: str) -> WizardStep:
    """Return the step reached by a successful ``action`` from ``step``.

    Raises:
        ValueError: If the action is not allowed from this step.
    """
    try:
        return WIZARD_TRANSITIONS[(step, action)]
    except KeyError:
        raise ValueError(f"Action '{action}' not allowed from step '{step.label}'") from None
