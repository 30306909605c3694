"""Three-step wizard controller.

configuring → choosing-script → viewing-result.  The controller owns the
campaign configuration, the script list and selection, and the generated
prompt package.  Each generation action runs the same sequence:

    prompt_builder → ModelGateway → response_parser

Only one generation call is in flight at a time; while one runs, every
other generation action is refused.  Generation errors never escape the
controller: they are turned into one user-visible message passed to the
``notify`` callback and kept in ``last_error``.
"""

import logging
from typing import Callable, Optional, Union

from adreel.exceptions import ConfigurationError, GenerationError
from adreel.orchestrator.state import WizardStep, next_step
from adreel.schemas import CampaignConfig, GeneratedVeoData, Script, VisionAnalysis
from adreel.services import prompt_builder
from adreel.services.llm.base import ModelGateway
from adreel.services.response_parser import (
    check_scene_prompt_alignment,
    check_script_shape,
    parse_model_output,
    scene_prompt_problems,
    script_shape_problems,
)

logger = logging.getLogger(__name__)

SCRIPTS_FAILED_MESSAGE = "Could not generate scripts. Please check the API key and try again."
PROMPTS_FAILED_MESSAGE = "Could not generate Veo prompts. Please try again."
VISION_FAILED_MESSAGE = "Could not analyze the product image. Please try another photo."


def _log_notification(message: str) -> None:
    logger.warning(message)


class Wizard:
    """State holder and action handlers for the script-to-prompt wizard."""

    def __init__(
        self,
        gateway: ModelGateway,
        config: Optional[CampaignConfig] = None,
        *,
        strict_counts: bool = False,
        notify: Optional[Callable[[str], None]] = None,
    ) -> None:
        """Initialize the wizard at the configuring step.

        Args:
            gateway: Transport used for every model call.
            config: Starting configuration; defaults to CampaignConfig().
            strict_counts: Treat wrong script/scene/prompt counts as a
                ParseError instead of logging them.
            notify: Receives user-visible error messages. Defaults to logging.
        """
        self._gateway = gateway
        self._config = config or CampaignConfig()
        self._strict_counts = strict_counts
        self._notify = notify or _log_notification

        self._step = WizardStep.CONFIGURING
        self._scripts: list[Script] = []
        self._selected: Optional[Script] = None
        self._veo_data: Optional[GeneratedVeoData] = None

        self.is_analyzing_image = False
        self.is_generating_scripts = False
        self.is_generating_prompts = False
        self.last_error: Optional[str] = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def step(self) -> WizardStep:
        return self._step

    @property
    def config(self) -> CampaignConfig:
        return self._config

    @property
    def scripts(self) -> list[Script]:
        """Copies of the current script candidates."""
        return [script.model_copy(deep=True) for script in self._scripts]

    @property
    def selected_script(self) -> Optional[Script]:
        return self._selected.model_copy(deep=True) if self._selected else None

    @property
    def veo_data(self) -> Optional[GeneratedVeoData]:
        return self._veo_data.model_copy(deep=True) if self._veo_data else None

    @property
    def is_busy(self) -> bool:
        return self.is_analyzing_image or self.is_generating_scripts or self.is_generating_prompts

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def update_config(self, **changes) -> CampaignConfig:
        """Replace configuration fields with user input.

        A generation call already in flight keeps the configuration it was
        started with.

        Raises:
            pydantic.ValidationError: If a value is not valid for its field.
        """
        self._config = CampaignConfig(**{**self._config.model_dump(), **changes})
        return self._config

    async def analyze_image(self, base64_image: str) -> bool:
        """Run vision analysis on a product photo and attach it to the configuration.

        Returns:
            True on success, False if refused or failed.
        """
        if self.is_busy:
            logger.info("Image analysis refused: another generation call is in flight")
            return False

        self.is_analyzing_image = True
        try:
            request = prompt_builder.build_vision_prompt()
            raw = await self._gateway.analyze_image(
                base64_image, request.text, response_schema=request.schema
            )
            analysis: VisionAnalysis = parse_model_output(raw, request.schema)
        except GenerationError as e:
            self._fail(VISION_FAILED_MESSAGE, e)
            return False
        finally:
            self.is_analyzing_image = False

        self._config = self._config.model_copy(update={"vision_data": analysis})
        self.last_error = None
        logger.info("Vision analysis attached: category=%s", analysis.category)
        return True

    # ------------------------------------------------------------------
    # Generation actions
    # ------------------------------------------------------------------

    async def generate_scripts(self) -> bool:
        """Generate the script candidates from the current configuration.

        On success the list (and any selection or result) is replaced and
        the wizard moves to choosing-script.  On failure nothing changes.
        """
        if self.is_busy:
            logger.info("Script generation refused: another generation call is in flight")
            return False
        if self._step is WizardStep.VIEWING_RESULT:
            logger.info("Script generation refused from step %s", self._step.label)
            return False

        config = self._config
        self.is_generating_scripts = True
        try:
            request = prompt_builder.build_scripts_prompt(config)
            logger.info(
                "Generating scripts via %s (prompt_chars=%d)", self._gateway.name, len(request.text)
            )
            raw = await self._gateway.generate(request.text, response_schema=request.schema)
            scripts: list[Script] = parse_model_output(raw, request.schema)
            if self._strict_counts:
                check_script_shape(scripts)
            else:
                self._log_count_problems(script_shape_problems(scripts))
        except GenerationError as e:
            self._fail(SCRIPTS_FAILED_MESSAGE, e)
            return False
        finally:
            self.is_generating_scripts = False

        self._scripts = scripts
        self._selected = None
        self._veo_data = None
        self._move("generate_scripts")
        self.last_error = None
        return True

    def select_script(self, choice: Union[Script, str, int]) -> Script:
        """Select a script by object, id, or zero-based position.

        Raises:
            ValueError: Outside the choosing-script step or if no script matches.
        """
        if self._step is not WizardStep.CHOOSING_SCRIPT:
            raise ValueError(f"Cannot select a script in step '{self._step.label}'")

        if isinstance(choice, int):
            if not 0 <= choice < len(self._scripts):
                raise ValueError(f"No script at position {choice}")
            match = self._scripts[choice]
        elif isinstance(choice, Script):
            match = next((s for s in self._scripts if s == choice), None)
            if match is None:
                raise ValueError(f"Script {choice.title!r} is not in the current list")
        else:
            match = next((s for s in self._scripts if s.id == choice), None)
            if match is None:
                raise ValueError(f"No script with id {choice!r}")

        self._selected = match
        logger.debug("Selected script %r", match.title)
        return match.model_copy(deep=True)

    async def generate_prompts(self) -> bool:
        """Generate the per-scene prompt package for the selected script.

        Without a selected script this is a no-op.  On failure the wizard
        stays on choosing-script with the selection kept.
        """
        if self._selected is None:
            logger.debug("Prompt generation skipped: no script selected")
            return False
        if self.is_busy:
            logger.info("Prompt generation refused: another generation call is in flight")
            return False
        if self._step is not WizardStep.CHOOSING_SCRIPT:
            logger.info("Prompt generation refused from step %s", self._step.label)
            return False

        script = self._selected
        config = self._config
        self.is_generating_prompts = True
        try:
            request = prompt_builder.build_veo_prompt(script, config)
            logger.info(
                "Generating %d scene prompts via %s", len(script.scenes), self._gateway.name
            )
            raw = await self._gateway.generate(request.text, response_schema=request.schema)
            veo_data: GeneratedVeoData = parse_model_output(raw, request.schema)
            if self._strict_counts:
                check_scene_prompt_alignment(script, veo_data)
            else:
                self._log_count_problems(scene_prompt_problems(script, veo_data))
        except GenerationError as e:
            self._fail(PROMPTS_FAILED_MESSAGE, e)
            return False
        finally:
            self.is_generating_prompts = False

        self._veo_data = veo_data
        self._move("generate_prompts")
        self.last_error = None
        return True

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def back(self) -> bool:
        """Return to the script gallery, dropping only the prompt package."""
        if self.is_busy or self._step is not WizardStep.VIEWING_RESULT:
            return False
        self._veo_data = None
        self._move("back")
        return True

    def reset(self) -> bool:
        """Start over: drop scripts, selection and prompt package.

        The configuration is kept as-is.
        """
        if self.is_busy:
            return False
        self._scripts = []
        self._selected = None
        self._veo_data = None
        if self._step is not WizardStep.CONFIGURING:
            self._move("reset")
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _move(self, action: str) -> None:
        previous = self._step
        self._step = next_step(previous, action)
        logger.info("Wizard step: %s -> %s (%s)", previous.label, self._step.label, action)

    def _log_count_problems(self, problems: list[str]) -> None:
        for problem in problems:
            logger.warning("Model output count mismatch: %s", problem)

    def _fail(self, message: str, error: GenerationError) -> None:
        kind = "configuration" if isinstance(error, ConfigurationError) else type(error).__name__
        logger.error("%s [%s] %s", message, kind, error)
        self.last_error = f"{message} ({error})"
        self._notify(self.last_error)
