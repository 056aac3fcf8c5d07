"""API routes for compilation steps.

Hosts discover steps (metadata and option schema) and option presets
here. The execute endpoint runs a step over posted scenes and returns
them rewritten.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from style_replacer.steps.registry import get_step_registry
from style_replacer.steps.schemas import (
    MarkerBlockConfig,
    Scene,
    StepDescription,
    StepPreset,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/steps", tags=["steps"])


# ── Request/Response schemas ─────────────────────────────


class StepExecuteRequest(BaseModel):
    """Request to run a step over scenes."""

    scenes: list[Scene] = Field(
        default_factory=list, description="Scenes to rewrite, in order"
    )
    preset_key: Optional[str] = Field(
        default=None,
        description="Preset whose option values are used as the base",
    )
    option_values: dict[str, Any] = Field(
        default_factory=dict,
        description="Option id -> value; overrides preset values",
    )


class StepExecuteResponse(BaseModel):
    """Response from step execution."""

    success: bool
    skipped: bool = False
    warning: Optional[str] = None
    scenes: list[Scene] = []
    scenes_modified: int = 0
    replacements: int = 0
    execution_time_ms: int = 0


# ── Helper ───────────────────────────────────────────────


def _get_step_or_404(step_key: str):
    """Get a step by key or raise 404."""
    registry = get_step_registry()
    step = registry.get_step(step_key)
    if step is None:
        raise HTTPException(
            status_code=404,
            detail=f"Step '{step_key}' not found. "
            f"Available: {registry.list_keys()}",
        )
    return step


def _get_preset_or_404(preset_key: str) -> StepPreset:
    """Get a preset by key or raise 404."""
    registry = get_step_registry()
    preset = registry.get_preset(preset_key)
    if preset is None:
        raise HTTPException(
            status_code=404,
            detail=f"Preset '{preset_key}' not found. "
            f"Available: {registry.list_preset_keys()}",
        )
    return preset


# ── List endpoints ───────────────────────────────────────


@router.get("", response_model=dict[str, StepDescription])
async def list_steps():
    """List metadata for every registered step."""
    return get_step_registry().list_descriptions()


@router.get("/presets", response_model=list[StepPreset])
async def list_presets(
    step_key: Optional[str] = Query(None, description="Filter by step key"),
):
    """List option presets."""
    return get_step_registry().list_presets(step_key=step_key)


@router.get("/presets/{preset_key}", response_model=StepPreset)
async def get_preset(preset_key: str):
    """Get a single preset by key."""
    return _get_preset_or_404(preset_key)


# ── Reload ───────────────────────────────────────────────


@router.post("/reload")
async def reload_presets():
    """Force reload presets from disk."""
    registry = get_step_registry()
    registry.reload()
    return {"reloaded": True, "count": len(registry.list_preset_keys())}


# ── Detail endpoint ──────────────────────────────────────


@router.get("/{step_key}", response_model=StepDescription)
async def get_step(step_key: str):
    """Get a step's metadata and option schema."""
    return _get_step_or_404(step_key).description


# ── Execute ──────────────────────────────────────────────


@router.post("/{step_key}/execute", response_model=StepExecuteResponse)
async def execute_step(step_key: str, request: StepExecuteRequest):
    """Run a step over the posted scenes.

    Option values come from the preset (if given) with explicit
    option_values layered on top. A missing marker or style name is not
    an error: the scenes come back unchanged with skipped=true.
    """
    step = _get_step_or_404(step_key)

    option_values: dict[str, Any] = {}
    if request.preset_key:
        preset = _get_preset_or_404(request.preset_key)
        if preset.step_key != step_key:
            raise HTTPException(
                status_code=400,
                detail=f"Preset '{preset.preset_key}' belongs to step "
                f"'{preset.step_key}', not '{step_key}'",
            )
        option_values.update(preset.option_values)
    option_values.update(request.option_values)

    config = MarkerBlockConfig(
        marker=option_values.get("marker"),
        style_name=option_values.get("styleName"),
    )
    result = await step.apply(request.scenes, config)

    if result.skipped:
        # Still return 200 so consumers can handle it
        logger.info(f"Step '{step_key}' skipped: {result.warning}")

    return StepExecuteResponse(
        success=result.success,
        skipped=result.skipped,
        warning=result.warning,
        scenes=result.scenes,
        scenes_modified=result.scenes_modified,
        replacements=result.replacements,
        execution_time_ms=result.execution_time_ms,
    )
