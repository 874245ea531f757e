"""
API v1 Router

Org-scoped collections live under /orgs/{org_id}; single projects and tasks
are addressed directly and their org is resolved from the record.
"""

from fastapi import APIRouter
from . import organizations, projects, search, tasks

router = APIRouter()

router.include_router(organizations.router, prefix="/orgs", tags=["Organizations"])
router.include_router(projects.org_router, prefix="/orgs/{org_id}/projects", tags=["Projects"])
router.include_router(search.router, prefix="/orgs/{org_id}", tags=["Search & Analytics"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(tasks.project_router, prefix="/projects/{project_id}/tasks", tags=["Tasks"])
router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])


@router.get("/", tags=["API"])
async def api_root():
    """API root - returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/orgs",
            "/orgs/{org_id}/members",
            "/orgs/{org_id}/projects",
            "/orgs/{org_id}/search",
            "/orgs/{org_id}/analytics/dashboard",
            "/projects/{project_id}",
            "/projects/{project_id}/tasks",
            "/tasks/{task_id}",
        ],
    }
