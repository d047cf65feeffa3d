# jobboard/main.py
import logging

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth import IdentityManager
from .config import settings
from .database import DocumentStore, create_store, get_store
from .errors import AppError, InternalError, NotFoundError, UnauthorizedError
from .saved import SavedJobsManager
from .schemas import (
    ApiResponse,
    HealthOut,
    LoginRequest,
    UserCreate,
    UserResponse,
    UsersResponse,
    UserUpdate,
    VagaCreate,
    VagaResponse,
    VagasResponse,
    VagaUpdate,
)
from .vagas import VagaManager

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="jobboard")

@app.on_event("startup")
async def startup_event():
    app.state.store = create_store(settings)

@app.on_event("shutdown")
async def shutdown_event():
    await app.state.store.close()

# Managers are built per request around the injected store
def get_identity(store: DocumentStore = Depends(get_store)) -> IdentityManager:
    return IdentityManager(store)

def get_saved_jobs(store: DocumentStore = Depends(get_store)) -> SavedJobsManager:
    return SavedJobsManager(store)

def get_vagas(store: DocumentStore = Depends(get_store)) -> VagaManager:
    return VagaManager(store)

# Error envelopes
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Requisição inválida"
    if errors and errors[0].get("msg"):
        message = f"{message}: {errors[0]['msg']}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": message},
    )

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

# Runs inside CORSMiddleware so 500 responses still carry the CORS headers
@app.middleware("http")
async def internal_error_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return await app_error_handler(request, InternalError())

# Added last so it wraps every other middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

@app.get("/health", response_model=HealthOut, tags=["monitoring"])
async def health_check(store: DocumentStore = Depends(get_store)):
    """
    Checks if the application is healthy, including the document store connection.
    """
    try:
        await store.ping()
        return {"status": "ok", "database": "ok"}
    except Exception:
        logger.exception("Store ping failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database connection error"
        )

# Users
@app.post("/api/users", response_model=UserResponse, response_model_exclude_unset=True,
          status_code=status.HTTP_201_CREATED, tags=["users"])
async def create_user(payload: UserCreate, identity: IdentityManager = Depends(get_identity)):
    user = await identity.register(payload.name, payload.email, payload.course, payload.password)
    return {"success": True, "message": "Usuário criado com sucesso", "user": user}

@app.post("/api/login", response_model=UserResponse, response_model_exclude_unset=True, tags=["users"])
async def login(payload: LoginRequest, identity: IdentityManager = Depends(get_identity)):
    try:
        user = await identity.authenticate(payload.email, payload.password)
    except NotFoundError as exc:
        raise UnauthorizedError(exc.message) from exc
    return {"success": True, "message": "Login realizado com sucesso", "user": user}

@app.get("/api/users", response_model=UsersResponse, response_model_exclude_unset=True, tags=["users"])
async def list_users(identity: IdentityManager = Depends(get_identity)):
    return {"success": True, "users": await identity.list_all()}

@app.get("/api/users/{user_id}", response_model=UserResponse, response_model_exclude_unset=True,
         tags=["users"])
async def get_user(user_id: str, identity: IdentityManager = Depends(get_identity)):
    return {"success": True, "user": await identity.get(user_id)}

@app.put("/api/users/{user_id}", response_model=UserResponse, response_model_exclude_unset=True,
         tags=["users"])
async def update_user(user_id: str, payload: UserUpdate,
                      identity: IdentityManager = Depends(get_identity)):
    user = await identity.update(user_id, payload.model_dump(exclude_unset=True))
    return {"success": True, "message": "Usuário atualizado com sucesso", "user": user}

@app.delete("/api/users/{user_id}", response_model=ApiResponse, tags=["users"])
async def delete_user(user_id: str, identity: IdentityManager = Depends(get_identity)):
    await identity.delete(user_id)
    return {"success": True, "message": "Usuário deletado com sucesso"}

# Saved jobs
@app.post("/api/users/{user_id}/saved/{vaga_id}", response_model=ApiResponse, tags=["saved"])
async def save_vaga(user_id: str, vaga_id: str, saved: SavedJobsManager = Depends(get_saved_jobs)):
    await saved.add(user_id, vaga_id)
    return {"success": True, "message": "Vaga salva com sucesso"}

@app.delete("/api/users/{user_id}/saved/{vaga_id}", response_model=ApiResponse, tags=["saved"])
async def unsave_vaga(user_id: str, vaga_id: str, saved: SavedJobsManager = Depends(get_saved_jobs)):
    await saved.remove(user_id, vaga_id)
    return {"success": True, "message": "Vaga removida dos salvos"}

@app.get("/api/users/{user_id}/saved", response_model=VagasResponse, response_model_exclude_unset=True,
         tags=["saved"])
async def list_saved_vagas(user_id: str, saved: SavedJobsManager = Depends(get_saved_jobs)):
    return {"success": True, "vagas": await saved.list_saved(user_id)}

# Vagas
@app.post("/api/vagas", response_model=VagaResponse, response_model_exclude_unset=True,
          status_code=status.HTTP_201_CREATED, tags=["vagas"])
async def create_vaga(payload: VagaCreate, vagas: VagaManager = Depends(get_vagas)):
    vaga = await vagas.create(payload.model_dump())
    return {"success": True, "message": "Vaga criada com sucesso", "vaga": vaga}

@app.get("/api/vagas", response_model=VagasResponse, response_model_exclude_unset=True, tags=["vagas"])
async def list_vagas(vagas: VagaManager = Depends(get_vagas)):
    return {"success": True, "vagas": await vagas.list_all()}

@app.get("/api/vagas/{vaga_id}", response_model=VagaResponse, response_model_exclude_unset=True,
         tags=["vagas"])
async def get_vaga(vaga_id: str, vagas: VagaManager = Depends(get_vagas)):
    return {"success": True, "vaga": await vagas.get(vaga_id)}

@app.put("/api/vagas/{vaga_id}", response_model=VagaResponse, response_model_exclude_unset=True,
         tags=["vagas"])
async def update_vaga(vaga_id: str, payload: VagaUpdate, vagas: VagaManager = Depends(get_vagas)):
    vaga = await vagas.update(vaga_id, payload.model_dump(exclude_unset=True))
    return {"success": True, "message": "Vaga atualizada com sucesso", "vaga": vaga}

@app.delete("/api/vagas/{vaga_id}", response_model=ApiResponse, tags=["vagas"])
async def delete_vaga(vaga_id: str, vagas: VagaManager = Depends(get_vagas)):
    await vagas.delete(vaga_id)
    return {"success": True, "message": "Vaga deletada com sucesso"}
