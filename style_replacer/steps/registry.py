"""Step registry — built-in steps plus option presets loaded from YAML.

Follows the definitions-registry pattern:
- Steps registered in code, keyed by step_key
- Presets loaded lazily from *.yaml files in a definitions/ directory
- In-memory dict keyed by preset_key
- Global singleton via get_step_registry()
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml

from .marker_block import MarkerBlockTransformer
from .schemas import StepDescription, StepPreset

logger = logging.getLogger(__name__)

DEFINITIONS_DIR = Path(__file__).parent / "definitions"


def _default_definitions_dir() -> Path:
    override = os.environ.get("STYLE_REPLACER_DEFINITIONS_DIR")
    return Path(override) if override else DEFINITIONS_DIR


class StepRegistry:
    """Registry of compilation steps and their option presets."""

    def __init__(self, definitions_dir: Optional[Path] = None):
        self.definitions_dir = definitions_dir or _default_definitions_dir()
        self._steps: dict[str, MarkerBlockTransformer] = {
            MarkerBlockTransformer.step_key: MarkerBlockTransformer(),
        }
        self._presets: dict[str, StepPreset] = {}
        self._loaded = False

    # ── Steps ─────────────────────────────────────────────

    def get_step(self, step_key: str) -> Optional[MarkerBlockTransformer]:
        """Get a step by key."""
        return self._steps.get(step_key)

    def get_description(self, step_key: str) -> Optional[StepDescription]:
        """Get a step's metadata by key."""
        step = self._steps.get(step_key)
        return step.description if step else None

    def list_descriptions(self) -> dict[str, StepDescription]:
        """All step metadata keyed by step key."""
        return {
            key: self._steps[key].description for key in sorted(self._steps)
        }

    def list_keys(self) -> list[str]:
        """List all step keys."""
        return sorted(self._steps.keys())

    def count(self) -> int:
        """Get total number of steps."""
        return len(self._steps)

    # ── Presets ───────────────────────────────────────────

    def load(self) -> None:
        """Load all option presets from YAML files."""
        if self._loaded:
            return

        if not self.definitions_dir.exists():
            logger.warning(
                f"Step definitions directory not found: {self.definitions_dir}"
            )
            self._loaded = True
            return

        for yaml_file in sorted(self.definitions_dir.glob("*.yaml")):
            try:
                with open(yaml_file, "r") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Failed to read presets from {yaml_file}: {e}")
                continue

            for preset_data in data.get("presets", []):
                try:
                    preset = StepPreset.model_validate(preset_data)
                except Exception as e:
                    logger.error(f"Failed to load preset from {yaml_file}: {e}")
                    continue
                if preset.step_key not in self._steps:
                    logger.warning(
                        f"Preset '{preset.preset_key}' targets unknown step "
                        f"'{preset.step_key}', skipping"
                    )
                    continue
                self._presets[preset.preset_key] = preset
                logger.debug(f"Loaded preset: {preset.preset_key}")

        self._loaded = True
        logger.info(f"Loaded {len(self._presets)} step presets")

    def get_preset(self, preset_key: str) -> Optional[StepPreset]:
        """Get a preset by key."""
        self.load()
        return self._presets.get(preset_key)

    def list_presets(self, step_key: Optional[str] = None) -> list[StepPreset]:
        """List presets, optionally only those for one step."""
        self.load()
        presets = sorted(self._presets.values(), key=lambda p: p.preset_key)
        if step_key:
            presets = [p for p in presets if p.step_key == step_key]
        return presets

    def list_preset_keys(self) -> list[str]:
        """List all preset keys."""
        self.load()
        return sorted(self._presets.keys())

    def reload(self) -> None:
        """Force reload all preset definitions."""
        self._loaded = False
        self._presets.clear()
        self.load()


# Global registry instance
_registry: Optional[StepRegistry] = None


def get_step_registry() -> StepRegistry:
    """Get the global step registry instance."""
    global _registry
    if _registry is None:
        _registry = StepRegistry()
        _registry.load()
    return _registry
