"""
日志配置与请求日志中间件
"""

from datetime import datetime
import logging
import traceback

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求/响应日志"""

    async def dispatch(self, request: Request, call_next):
        start_time = datetime.now()
        logger.info(f"[REQUEST] {request.method} {request.url.path}")

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = (datetime.now() - start_time).total_seconds()
            logger.error(
                f"[ERROR] {request.method} {request.url.path} - "
                f"Error: {e} - Time: {process_time:.3f}s"
            )
            logger.error(f"Traceback: {traceback.format_exc()}")
            raise

        process_time = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"[RESPONSE] {request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.3f}s"
        )
        return response
