"""Chaos toggle endpoints."""
from fastapi import APIRouter, Depends
import logging

from pizza_metrics.api.dependencies import get_chaos_controller
from pizza_metrics.api.models import ChaosResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chaos", tags=["chaos"])


@router.get("", response_model=ChaosResponse)
def chaos_status(chaos=Depends(get_chaos_controller)):
    return ChaosResponse(chaos=chaos.is_chaos_enabled())


@router.put("/{state}", response_model=ChaosResponse)
def set_chaos(state: bool, chaos=Depends(get_chaos_controller)):
    """Enable or disable simulated faults.

    ``state`` accepts the usual boolean spellings (true/false, 1/0, on/off).
    """
    chaos.enable_chaos(state)
    return ChaosResponse(chaos=chaos.is_chaos_enabled())
