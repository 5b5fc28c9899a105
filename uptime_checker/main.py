import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from uptime_checker.api_schemas import HealthResponse, JobResponse
from uptime_checker.config import settings
from uptime_checker.jobs_file import load_jobs_file, register_jobs
from uptime_checker.models import JobConfig
from uptime_checker.registry import JobNotFoundError, JobRegistry

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)
registry = JobRegistry()


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.UPTIME_JOBS_FILE:
        ids = register_jobs(registry, load_jobs_file(Path(settings.UPTIME_JOBS_FILE)))
        logger.info("Registered %d job(s) from %s", len(ids), settings.UPTIME_JOBS_FILE)
    yield
    await run_in_threadpool(registry.close)


app = FastAPI(
    title="Uptime Checker",
    version="1.0.0",
    description=(
        "Periodically checks configured URLs and logs whether each response "
        "matches the expected status code and optional jq expectation."
    ),
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def admission_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["system"],
    summary="Health Check",
    description="Liveness endpoint used by load balancers and orchestration.",
)
def health():
    return {"status": "ok"}


@app.get(
    "/jobs/",
    response_model=list[JobResponse],
    response_model_exclude_none=True,
    tags=["jobs"],
    summary="List Jobs",
    description="All live jobs. Order is by id.",
)
@app.get("/jobs", include_in_schema=False, response_model=list[JobResponse], response_model_exclude_none=True)
def list_jobs():
    return [JobResponse.from_spec(spec) for spec in registry.list()]


@app.post(
    "/jobs/",
    status_code=201,
    response_model=JobResponse,
    response_model_exclude_none=True,
    tags=["jobs"],
    summary="Create Job",
    description="Registers a job and starts checking it on its own period.",
)
@app.post("/jobs", include_in_schema=False, status_code=201, response_model=JobResponse, response_model_exclude_none=True)
def create_job(job: JobConfig):
    spec = job.to_spec()
    job_id = registry.add(spec)
    return JobResponse.from_spec(spec.with_id(job_id))


@app.get(
    "/jobs/{job_id}",
    response_model=JobResponse,
    response_model_exclude_none=True,
    tags=["jobs"],
    summary="Get Job",
)
def get_job(job_id: int):
    try:
        return JobResponse.from_spec(registry.get(job_id))
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown job id: {job_id}")


@app.put(
    "/jobs/{job_id}",
    response_model=JobResponse,
    response_model_exclude_none=True,
    tags=["jobs"],
    summary="Replace Job",
    description="Replaces the job definition and restarts its runner. The id is kept.",
)
def update_job(job_id: int, job: JobConfig):
    try:
        spec = registry.update(job_id, job.to_spec())
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown job id: {job_id}")
    return JobResponse.from_spec(spec)


@app.delete(
    "/jobs/{job_id}",
    status_code=204,
    response_class=Response,
    tags=["jobs"],
    summary="Delete Job",
    description="Stops and removes the job. Deleting an unknown id also succeeds.",
)
def delete_job(job_id: int):
    registry.delete(job_id)
    return Response(status_code=204)
