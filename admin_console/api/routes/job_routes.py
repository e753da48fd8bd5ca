"""
Job Posting Moderation Routes

GET /admin/job-postings - List postings
GET /admin/job-postings/{id} - Get posting
PATCH /admin/job-postings/{id} - Set featured / status / archived
DELETE /admin/job-postings/{id} - Delete posting
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text
from typing import Optional

from admin_console.api.deps import list_params, list_page, build_update
from admin_console.core import cache
from admin_console.core.auth import get_current_admin
from admin_console.db.postgres import get_db_session
from admin_console.services.activity_service import get_activity_service
from admin_console.services.listing import ListParams
from admin_console.services.records import cached, find_by_id
from admin_console.utils.dates import utcnow, to_db_timestamp
from admin_console.schemas.schemas import (
    JobPostingResponse, JobPostingUpdate, JobStatus, JobType, MessageResponse, Page
)

router = APIRouter(prefix="/job-postings", tags=["Jobs"])

SEARCH_FIELDS = ("title", "description", "location", "company_name")
SORT_KINDS = {
    "title": "text",
    "company_name": "text",
    "location": "text",
    "status": "text",
    "created_at": "date",
    "max_compensation": "number",
}


def _get_or_404(job_id: int) -> dict:
    job = find_by_id(cache.JOBS, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job posting not found")
    return job


@router.get("", response_model=Page[JobPostingResponse])
async def list_jobs(
    status: Optional[JobStatus] = Query(None),
    job_type: Optional[JobType] = Query(None),
    featured: Optional[bool] = Query(None),
    archived: Optional[bool] = Query(None),
    remote: Optional[bool] = Query(None),
    params: ListParams = Depends(list_params),
    admin: dict = Depends(get_current_admin)
):
    """List job postings with their company name."""
    return list_page(
        cached(cache.JOBS), params, SEARCH_FIELDS, SORT_KINDS,
        status=status.value if status else None,
        job_type=job_type.value if job_type else None,
        featured=featured, archived=archived, remote=remote,
    )


@router.get("/{job_id}", response_model=JobPostingResponse)
async def get_job(job_id: int, admin: dict = Depends(get_current_admin)):
    return _get_or_404(job_id)


@router.patch("/{job_id}", response_model=JobPostingResponse)
async def moderate_job(job_id: int, data: JobPostingUpdate, admin: dict = Depends(get_current_admin)):
    """Feature, archive or change the status of a posting. Bumps modified_at."""
    _get_or_404(job_id)
    updates, params = build_update(data)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    changes = dict(params)
    params.update({"id": job_id, "modified_at": to_db_timestamp(utcnow())})

    with get_db_session() as db:
        db.execute(
            text(f"UPDATE job_postings SET {', '.join(updates)}, modified_at = :modified_at WHERE id = :id"),
            params
        )

    cache.invalidate(cache.JOBS)
    get_activity_service().log_action(admin, "MODERATE_JOB", "job_posting", job_id, changes)
    return _get_or_404(job_id)


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: int, admin: dict = Depends(get_current_admin)):
    _get_or_404(job_id)

    with get_db_session() as db:
        db.execute(text("DELETE FROM job_postings WHERE id = :id"), {"id": job_id})

    cache.invalidate(cache.JOBS)
    get_activity_service().log_action(admin, "DELETE_JOB", "job_posting", job_id)
    return MessageResponse(message="Job posting deleted")
