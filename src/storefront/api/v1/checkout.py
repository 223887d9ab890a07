# src/storefront/api/v1/checkout.py
from typing import Annotated

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_checkout_autosave
from storefront.domain.models import AutoSaveStatus, CheckoutDraft
from storefront.services.checkout_autosave import CheckoutAutoSave

router = APIRouter(prefix="/checkout", tags=["Checkout"])

AutoSaveDep = Annotated[CheckoutAutoSave, Depends(get_checkout_autosave)]


@router.get("/draft", response_model=CheckoutDraft, response_model_exclude_unset=True)
async def get_draft(autosave: AutoSaveDep) -> CheckoutDraft:
    return await autosave.load()


@router.patch("/draft", response_model=AutoSaveStatus, status_code=status.HTTP_202_ACCEPTED)
async def update_draft(payload: CheckoutDraft, autosave: AutoSaveDep) -> AutoSaveStatus:
    autosave.save(payload)
    return AutoSaveStatus(
        state=autosave.state.value, pending_fields=sorted(autosave.pending_fields)
    )


@router.post("/draft/flush", status_code=status.HTTP_204_NO_CONTENT)
async def flush_draft(autosave: AutoSaveDep) -> None:
    await autosave.flush()


@router.delete("/draft", status_code=status.HTTP_204_NO_CONTENT)
async def delete_draft(autosave: AutoSaveDep) -> None:
    await autosave.clear()
