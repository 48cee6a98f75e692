from datetime import datetime
from functools import lru_cache
from pathlib import Path
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from config.settings import get_settings
from models.persona_models import (
    ContinuationRequest,
    ContinuationResponse,
    DialogueRequest,
    DialogueResponse,
    HealthResponse,
    StoryRequest,
    StoryResponse,
)
from providers.llm_provider import LLMProvider, LLMProviderFactory
from services.persona_service import (
    CONTINUATION,
    DIALOGUE,
    PERSONAS_BY_PATH,
    STORY,
    PersonaReply,
    PersonaService,
)
from utils.request_logging import LoggingMiddleware, setup_logging

settings = get_settings()
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / settings.PUBLIC_DIR

for warning in settings.validate_settings():
    logger.error(f"配置警告: {warning}")

app = FastAPI(
    title="文明回响 AI Server",
    description="神兽讲诗、东坡对话、诗词续写",
    version="1.0.0"
)

app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)
app.mount("/static", StaticFiles(directory=PUBLIC_DIR, check_dir=False), name="static")


@lru_cache()
def get_provider() -> LLMProvider:
    return LLMProviderFactory.create(get_settings())


def get_persona_service(provider: LLMProvider = Depends(get_provider)) -> PersonaService:
    return PersonaService(provider)


def to_response(reply: PersonaReply) -> JSONResponse:
    return JSONResponse(status_code=reply.status_code, content=reply.body)


@app.get("/")
async def root():
    """首页"""
    index = PUBLIC_DIR / "kid.html"
    if not index.is_file():
        return JSONResponse(status_code=404, content={"error": "kid.html 不存在"})
    return FileResponse(index)


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    current = get_settings()
    provider_info = current.get_current_provider_info()
    return HealthResponse(
        status="ok",
        time=datetime.now().isoformat(),
        env="hosted" if current.is_hosted else "local",
        has_key=provider_info["status"] == "configured",
        model=provider_info["model"],
    )


@app.post(STORY.path, response_model=StoryResponse)
async def kids_story(request: StoryRequest, service: PersonaService = Depends(get_persona_service)):
    """儿童神兽诗故事"""
    return to_response(await service.run(STORY, request))


@app.post(DIALOGUE.path, response_model=DialogueResponse)
async def sushi_dialogue(request: DialogueRequest, service: PersonaService = Depends(get_persona_service)):
    """苏轼时空对话"""
    return to_response(await service.run(DIALOGUE, request))


@app.post(CONTINUATION.path, response_model=ContinuationResponse)
async def creation_continue(request: ContinuationRequest, service: PersonaService = Depends(get_persona_service)):
    """诗词混创工坊 (AI 协助续写)"""
    return to_response(await service.run(CONTINUATION, request))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    persona = PERSONAS_BY_PATH.get(request.url.path)
    if persona is None:
        return await request_validation_exception_handler(request, exc)

    logger.info(f"{persona.name} 请求体无效: {exc.errors()}")
    return JSONResponse(status_code=400, content=persona.reply(persona.missing_message))


def run():
    import uvicorn

    if settings.is_hosted:
        logger.info("托管环境由外部路由调用，不自行监听端口")
        return

    logger.info(f"文明回响已启动：http://127.0.0.1:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
