"""Project management routes"""

from fastapi import APIRouter, Depends, Request, Response

from backend.sessions import create_session
from backend.dependencies import get_current_session, SESSION_HEADER
from backend.schemas.project import ProjectCreateRequest, ProjectInfoResponse

router = APIRouter()


@router.post("/new")
async def new_project(request_body: ProjectCreateRequest, request: Request, response: Response):
    """Create a new project and session"""
    session_id = create_session(request_body.name)
    # Store on request.state so middleware sets the header
    request.state.new_session_id = session_id
    response.headers[SESSION_HEADER] = session_id
    return {"session_id": session_id, "name": request_body.name}


@router.get("/info")
async def get_project_info(session: dict = Depends(get_current_session)):
    """Get current project information"""
    designer = session["designer"]
    result = designer.result if designer is not None else None
    return ProjectInfoResponse(
        name=session["project_name"],
        has_design=result is not None,
        total_units=result.parameters.total_units if result is not None else None,
        seed=result.parameters.seed if result is not None else None,
    )


@router.put("/name")
async def update_project_name(
    body: ProjectCreateRequest,
    session: dict = Depends(get_current_session),
):
    """Update project name"""
    session["project_name"] = body.name
    return {"success": True}
