"""
Prompt loader for signal generation.

Loads the provider prompts from YAML configuration, falling back to
built-in prompts when the file is missing or malformed.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_PROMPTS_PATH = Path(__file__).parent / "prompts.yaml"
PROMPT_KEY = "signal_analysis"

FALLBACK_PROMPTS = {
    PROMPT_KEY: {
        "system": "You are an expert forex trading AI. Answer with one JSON object.",
        "user_template": (
            "Analyze the {pair} market for a 5-minute (M5) trade. Return JSON with "
            'action ("BUY/CALL" or "SELL/PUT"), confidence (70-99) and analysis '
            "(brief technical reason). Current Time: {current_time}"
        ),
    }
}


class PromptLoader:
    """Load and render the signal analysis prompts."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None) -> None:
        self.config_path = Path(config_path) if config_path else DEFAULT_PROMPTS_PATH
        self.prompts = self._load_prompts()

    def _load_prompts(self) -> dict[str, Any]:
        """Load prompts from the YAML file."""
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                prompts = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            logger.error("Failed to load prompts from %s: %s", self.config_path, exc)
            return FALLBACK_PROMPTS

        if not isinstance(prompts, dict) or PROMPT_KEY not in prompts:
            logger.error("Prompt file %s has no '%s' entry", self.config_path, PROMPT_KEY)
            return FALLBACK_PROMPTS

        logger.info("Loaded prompts from %s", self.config_path)
        return prompts

    @property
    def system_prompt(self) -> str:
        return self.prompts[PROMPT_KEY].get(
            "system", FALLBACK_PROMPTS[PROMPT_KEY]["system"]
        )

    def render_user_prompt(self, pair: str, now: datetime) -> str:
        """Fill the user template for a pair at a given time."""
        template = self.prompts[PROMPT_KEY].get(
            "user_template", FALLBACK_PROMPTS[PROMPT_KEY]["user_template"]
        )
        return template.format(pair=pair, current_time=now.strftime("%H:%M:%S UTC"))


_prompt_loader: Optional[PromptLoader] = None


def get_prompt_loader() -> PromptLoader:
    """Return the process-wide prompt loader, loading it on first use."""
    global _prompt_loader
    if _prompt_loader is None:
        _prompt_loader = PromptLoader()
    return _prompt_loader
