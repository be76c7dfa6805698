"""
账号服务 - FastAPI应用主入口
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.exceptions import AppError, InvalidParams, DatabaseError, Unknown
from app.core.logging import setup_logging, get_logger
from app.middleware import RequestLoggingMiddleware
from app.schemas.common import fail
from app.api import auth, invite

setup_logging()
logger = get_logger()


@asynccontextmanager
async def lifespan(application: FastAPI):
    if settings.DEBUG:
        from app.db.database import init_models
        await init_models()
        logger.info("数据表已按模型创建")
    yield
    from app.db.database import engine
    await engine.dispose()
    logger.info("数据库连接池已释放")


# 创建FastAPI应用
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="用户账号服务API",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# 配置CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"]
)
app.add_middleware(RequestLoggingMiddleware)


# 异常统一转换为 {"status": 0, "message": ..., "data": null}
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=fail(exc.message).model_dump())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    error = InvalidParams()
    return JSONResponse(status_code=error.status_code, content=fail(error.message).model_dump())


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("数据库异常: %s %s", request.method, request.url.path, exc_info=exc)
    error = DatabaseError()
    return JSONResponse(status_code=error.status_code, content=fail(error.message).model_dump())


@app.exception_handler(Exception)
async def unknown_error_handler(request: Request, exc: Exception):
    logger.error("未处理的异常: %s %s", request.method, request.url.path, exc_info=exc)
    error = Unknown()
    return JSONResponse(status_code=error.status_code, content=fail(error.message).model_dump())


# 注册路由
app.include_router(auth.router)
app.include_router(invite.router)


@app.get("/")
async def root():
    """根路径"""
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "message": "用户账号服务正在运行"
    }


@app.get("/health")
async def health_check():
    """健康检查"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
