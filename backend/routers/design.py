"""Design routes - IBD generation, re-randomization, field map, export"""

import logging
import traceback
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.concurrency import run_in_threadpool

from backend.dependencies import get_current_session, get_current_designer
from backend.schemas.design import (
    IBDGenerateRequest, IBDGenerateResponse, RerandomizeRequest, RerandomizeResponse,
)
from backend.services import design_service, export_service
from core.design_validator import DesignValidationError
from utils.sanitization import export_filename

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generate")
async def generate_design(
    body: IBDGenerateRequest,
    session: dict = Depends(get_current_session),
):
    """Generate a resolvable incomplete block design"""
    try:
        logger.info(f"[GENERATE] t={body.treatments}, k={body.block_size}, r={body.replications}, "
                    f"L={body.locations}, seed={body.seed}, start_plot={body.start_plot}")
        # Eigenvalue analysis of large designs runs off the event loop
        designer, payload = await run_in_threadpool(
            design_service.generate_ibd,
            body.treatments, body.block_size, body.replications,
            locations=body.locations, seed=body.seed, start_plot=body.start_plot,
        )
    except DesignValidationError as e:
        logger.warning(f"[GENERATE] Invalid parameters: {e}")
        raise HTTPException(400, str(e))
    except Exception as e:
        logger.error(f"[GENERATE] ERROR: {e}\n{traceback.format_exc()}")
        raise HTTPException(400, str(e))

    session["designer"] = designer
    session["exporter"].set_result(designer.result)
    return IBDGenerateResponse(**payload)


@router.post("/rerandomize")
async def rerandomize_design(
    body: RerandomizeRequest,
    session: dict = Depends(get_current_session),
    designer=Depends(get_current_designer),
):
    """Relabel treatments of the current design, keeping its layout"""
    payload = design_service.rerandomize_designer(designer, seed=body.seed)
    session["exporter"].set_result(designer.result)
    return RerandomizeResponse(**payload)


@router.get("/summary")
async def get_summary(designer=Depends(get_current_designer)):
    """Get total units, blocks per replicate and efficiencies"""
    return designer.summary()


@router.get("/field-map")
async def get_field_map(designer=Depends(get_current_designer)):
    """Get the field book grouped by location, replicate and block"""
    return {"locations": designer.field_map()}


@router.get("/field-book")
async def get_field_book(designer=Depends(get_current_designer)):
    """Get the current field book"""
    return {"field_book": design_service.serialize_field_book(designer.result.field_book)}


@router.post("/validate")
async def validate_design(body: IBDGenerateRequest):
    """Validate design parameters"""
    valid, errors, warnings = design_service.validate_design_params(
        body.treatments, body.block_size, body.replications, body.locations,
    )
    return {"valid": valid, "errors": errors, "warnings": warnings}


@router.post("/export/excel")
async def export_excel(
    session: dict = Depends(get_current_session),
    designer=Depends(get_current_designer),
):
    """Export design as Excel file"""
    try:
        excel_bytes = export_service.generate_excel_bytes(session["exporter"])
    except Exception as e:
        logger.error(f"[EXPORT] ERROR: {e}\n{traceback.format_exc()}")
        raise HTTPException(400, str(e))

    filename = export_filename(session["project_name"], datetime.now().strftime('%Y%m%d'), "xlsx")
    return Response(
        content=excel_bytes,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/export/csv")
async def export_csv(
    session: dict = Depends(get_current_session),
    designer=Depends(get_current_designer),
):
    """Export field book as CSV"""
    csv_bytes = export_service.generate_csv_bytes(session["exporter"])

    filename = export_filename(session["project_name"], datetime.now().strftime('%Y%m%d'), "csv")
    return Response(
        content=csv_bytes,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
