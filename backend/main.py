from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pymongo.errors import PyMongoError

from config import API_PREFIX, LOG_LEVEL, LOG_FILE, STORE_BACKEND
from logger import setup_logger
from protocol import StoreUnavailableError
from routers import auth_router, progress_router, journey_router

setup_logger(level=LOG_LEVEL, log_file=LOG_FILE)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if STORE_BACKEND == "mongo":
        from database import ensure_indexes
        try:
            ensure_indexes()
        except PyMongoError:
            # 数据库暂不可用时服务仍可启动, 请求会返回503
            logger.exception("Failed to create MongoDB indexes")
    logger.info(f"Daily protocol API started with {STORE_BACKEND} backend")
    yield


app = FastAPI(
    title="每日协议 API",
    description="记录每日打卡、体重与阶段进度的后端服务",
    version="1.0.0",
    lifespan=lifespan,
)

# 配置CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 生产环境请设置具体域名
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    """存储故障: 状态未改变, 由客户端重试"""
    logger.warning(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=503, content={"detail": "存储暂时不可用, 请稍后重试"})


# 注册路由
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(progress_router, prefix=API_PREFIX)
app.include_router(journey_router, prefix=API_PREFIX)


@app.get("/")
async def root():
    return {"message": "每日协议 API 服务运行中", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
