from fastapi import APIRouter

router = APIRouter()
api_router = APIRouter()


@router.get("/health")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@api_router.get("/test")
@api_router.get("/")
def hello() -> dict[str, str]:
    return {"message": "Hello World"}
