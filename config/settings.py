"""
环境配置管理
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Kimi (Moonshot) 设置
    KIMI_API_KEY: str = ""
    KIMI_MODEL: str = "moonshot-v1-8k"
    KIMI_API_URL: str = "https://api.moonshot.cn/v1/chat/completions"
    UPSTREAM_TIMEOUT: float = 25.0  # 秒

    # 服务设置
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    VERCEL: bool = False  # 托管部署时由平台注入
    CORS_ORIGINS: str = "http://127.0.0.1:3000,http://localhost:3000"
    PUBLIC_DIR: str = "public"

    # 日志设置
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"  # 忽略多余的环境变量

    @property
    def is_hosted(self) -> bool:
        return self.VERCEL

    def get_cors_origins(self) -> List[str]:
        """托管环境开放跨域，本地只允许配置的来源"""
        if self.is_hosted:
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def get_current_provider_info(self) -> dict:
        """当前 Provider 信息"""
        return {
            "provider": "kimi",
            "model": self.KIMI_MODEL,
            "status": "configured" if self.KIMI_API_KEY else "missing_key",
        }

    def validate_settings(self) -> list:
        """检查配置并返回警告列表"""
        warnings = []

        if not self.KIMI_API_KEY:
            warnings.append("缺少 KIMI_API_KEY，请先配置 .env 文件")

        if self.UPSTREAM_TIMEOUT <= 0:
            warnings.append(f"UPSTREAM_TIMEOUT 必须为正数: {self.UPSTREAM_TIMEOUT}")

        if not self.is_hosted and not self.get_cors_origins():
            warnings.append("CORS_ORIGINS 为空，浏览器跨域请求将被拒绝")

        return warnings


@lru_cache()
def get_settings() -> Settings:
    return Settings()
