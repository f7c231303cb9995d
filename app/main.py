from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse
from sqlalchemy import text

from app.db.session import engine
from app.core.redis import async_redis
from app.core.security import warn_if_default_secret
from app.routers import account_router, catalog_router, contact_router, order_router

import uvicorn

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting storefront service...")
    warn_if_default_secret()

    # 数据库不可用直接启动失败
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        logger.info("✅ Database connection successful")
    except Exception as e:
        logger.error("❌ Database connection failed: %s", e)
        raise

    # Redis 只做目录缓存，不可用时降级
    try:
        await async_redis.ping()
        logger.info("✅ Redis connected successfully")
    except Exception as e:
        logger.warning(f"⚠️  Redis connection failed: {e}")
        logger.warning("⚠️  Catalog reads will go straight to the database")

    yield

    logger.info("Shutting down storefront service...")
    await async_redis.aclose()
    engine.dispose()


app = FastAPI(
    title="商城订单服务 API",
    description="商品目录、客户账户、下单与后台订单管理",
    version="1.0.0",
    lifespan=lifespan
)

# 会话放在 Cookie 里，跨域需要带凭证
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 生产环境中应该指定具体域名
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for api_router in (
    order_router.router,
    order_router.me_router,
    account_router.customer_router,
    account_router.admin_router,
    catalog_router.router,
    contact_router.router,
):
    app.include_router(api_router, prefix=API_PREFIX)


def error_body(message, **extra) -> dict:
    """统一错误响应体 {"error": ...}"""
    return {"error": message, **extra}


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.info(f"Invalid request on {request.url.path}: {details}")
    return JSONResponse(status_code=400, content=error_body("Invalid request", details=details))


@app.exception_handler(HTTPException)
async def handle_http_error(request: Request, exc: HTTPException):
    log = logger.error if exc.status_code >= 500 else logger.info
    log(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(f"Unexpected error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content=error_body("Internal Server Error"))


@app.get("/health")
async def health_check():
    """健康检查接口"""
    return {
        "status": "healthy",
        "service": "storefront-orders",
        "version": app.version
    }


@app.get("/")
async def read_root():
    return {
        "message": "欢迎使用商城订单服务",
        "docs": "/docs",
        "api": API_PREFIX,
        "health": "/health"
    }


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
