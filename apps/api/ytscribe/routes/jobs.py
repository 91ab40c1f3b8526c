"""Job routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from ytscribe.routes.dependencies import get_job_service, get_query_service
from ytscribe.schemas.error import (
    ErrorResponse,
    FsmTransitionError,
    NoLeakNotFoundError,
    UpstreamError,
)
from ytscribe.schemas.job import Job, SubmitJobRequest, SubmitJobResponse
from ytscribe.services.jobs import JobService

router = APIRouter(prefix="/jobs", tags=["Jobs"])


# Plain ``def`` handlers run in the threadpool; metadata resolution and
# summarization block on the network.
@router.post(
    "",
    response_model=SubmitJobResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"model": SubmitJobResponse},
        422: {"model": ErrorResponse},
        502: {"model": UpstreamError},
    },
)
def submit_job(
    payload: SubmitJobRequest,
    response: Response,
    service: Annotated[JobService, Depends(get_job_service)],
) -> SubmitJobResponse:
    result = service.submit_job(source_ref=payload.source_ref)
    response.status_code = status.HTTP_200_OK if result.duplicate else status.HTTP_201_CREATED
    return result


@router.get("", response_model=list[Job])
async def list_jobs(
    service: Annotated[JobService, Depends(get_query_service)],
) -> list[Job]:
    return service.list_jobs()


@router.get(
    "/{jobId}",
    response_model=Job,
    responses={404: {"model": NoLeakNotFoundError}},
)
async def get_job(
    job_id: Annotated[str, Path(alias="jobId")],
    service: Annotated[JobService, Depends(get_query_service)],
) -> Job:
    return service.get_job(job_id=job_id)


@router.post(
    "/{jobId}/summarize",
    response_model=Job,
    responses={
        404: {"model": NoLeakNotFoundError},
        409: {"model": FsmTransitionError},
        502: {"model": UpstreamError},
    },
)
def summarize_job(
    job_id: Annotated[str, Path(alias="jobId")],
    service: Annotated[JobService, Depends(get_job_service)],
) -> Job:
    return service.resummarize_job(job_id=job_id)
