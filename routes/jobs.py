from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from core.access import get_current_user, get_storage, require_owner
from schemas.job import JobCreate, JobIn, JobOut, JobType, JobUpdate
from schemas.users import UserRecord
from storage import Storage

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _get_job(storage: Storage, job_id: str) -> JobOut:
    job = storage.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.get("", response_model=List[JobOut])
def list_jobs(
    search: Optional[str] = None,
    category: Optional[str] = None,
    job_type: Optional[JobType] = None,
    storage: Storage = Depends(get_storage),
):
    return storage.list_jobs(search=search, category=category, job_type=job_type)


@router.get("/poster/{poster_id}", response_model=List[JobOut])
def list_poster_jobs(poster_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_jobs_by_poster(poster_id)


@router.post("", response_model=JobOut, status_code=201)
def create_job(
    data: JobIn,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return storage.create_job(JobCreate(**data.model_dump(), poster_id=current_user.id))


@router.get("/{job_id}", response_model=JobOut)
def get_job(job_id: str, storage: Storage = Depends(get_storage)):
    return _get_job(storage, job_id)


@router.patch("/{job_id}", response_model=JobOut)
def update_job(
    job_id: str,
    data: JobUpdate,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    job = _get_job(storage, job_id)
    require_owner(current_user, job.poster_id, "job posting")
    updated = storage.update_job(job.id, data.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Job not found")
    return updated


@router.delete("/{job_id}", status_code=204)
def delete_job(
    job_id: str,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    job = _get_job(storage, job_id)
    require_owner(current_user, job.poster_id, "job posting")
    if not storage.delete_job(job.id):
        raise HTTPException(status_code=404, detail="Job not found")
    return None
