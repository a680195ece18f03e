"""
Prompt Management Service.

Prompts for AI question drafting live in YAML files under prompts/, each with
a `system_prompt` and a `human_prompt` template.
"""
import logging
import os
import yaml
from typing import Optional, Dict, Any
from functools import lru_cache

logger = logging.getLogger(__name__)

# Path to prompts directory
PROMPTS_DIR = os.path.join(os.path.dirname(__file__), "..", "prompts")


class _KeepMissing(dict):
    """format_map helper that leaves unknown {placeholders} untouched."""

    def __missing__(self, key):
        return "{" + key + "}"


@lru_cache(maxsize=20)
def _load_prompt_file(name: str) -> Optional[Dict[str, Any]]:
    """Load a prompt from YAML file with caching."""
    file_path = os.path.join(PROMPTS_DIR, f"{name}.yaml")

    if not os.path.exists(file_path):
        logger.warning("Prompt file not found: %s", file_path)
        return None

    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def get_prompt(name: str, **kwargs) -> Dict[str, str]:
    """
    Get a prompt by name.

    Args:
        name: Name of the prompt (without .yaml extension)
        **kwargs: Variables to interpolate into the prompt

    Returns:
        Dict with 'system_prompt' and 'human_prompt' keys
    """
    prompt_data = _load_prompt_file(name) or {}
    values = _KeepMissing(kwargs)
    return {
        "system_prompt": prompt_data.get("system_prompt", "").format_map(values),
        "human_prompt": prompt_data.get("human_prompt", "").format_map(values),
    }


def clear_cache():
    """Clear the prompt cache (useful after updating YAML files)."""
    _load_prompt_file.cache_clear()
