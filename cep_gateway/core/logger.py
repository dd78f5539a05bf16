"""
统一日志系统 - 基于 loguru

日志级别策略:
- DEBUG: 每次 Provider 尝试、缓存读写细节
- INFO:  查询开始/结束、缓存命中、缓存写入
- WARNING: 单个 Provider 失败（将切换到下一个）、Redis 降级
- ERROR: 全部 Provider 失败

输出策略:
- 控制台: 级别由 LOG_LEVEL 控制，生产环境使用无颜色格式
- 文件: LOG_DISABLE_FILE=true 时关闭；开启时写入 LOG_DIR（默认 ./logs），按大小轮转

使用方式:
    from cep_gateway.core.logger import logger

    logger.info("消息")
    logger.warning("警告")
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from loguru import logger

# ============================================================================
# 环境检测
# ============================================================================

IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if IS_PRODUCTION else "DEBUG").upper()

# 是否禁用文件日志 (用于测试或容器场景)
DISABLE_FILE_LOG = os.getenv("LOG_DISABLE_FILE", "false").lower() == "true"

LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))

# ============================================================================
# 日志格式定义
# ============================================================================

CONSOLE_FORMAT_DEV = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{message}</cyan>"
)

CONSOLE_FORMAT_PROD = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"

# ============================================================================
# 日志配置
# ============================================================================

logger.remove()

if IS_PRODUCTION:
    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT_PROD,
        level=LOG_LEVEL,
        colorize=False,
        backtrace=False,
        diagnose=False,
    )
else:
    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT_DEV,
        level=LOG_LEVEL,
        colorize=True,
    )

if not DISABLE_FILE_LOG:
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    file_log_config = {
        "format": FILE_FORMAT,
        "rotation": "50 MB",
        "retention": "14 days",
        "compression": "gz",
        "enqueue": False,
        "encoding": "utf-8",
        "catch": True,
    }

    if IS_PRODUCTION:
        file_log_config["backtrace"] = False
        file_log_config["diagnose"] = False

    logger.add(  # type: ignore[call-overload]
        LOG_DIR / "cep_gateway.log",
        level="DEBUG",
        **file_log_config,
    )

    error_log_config = file_log_config.copy()
    error_log_config["rotation"] = "20 MB"
    logger.add(  # type: ignore[call-overload]
        LOG_DIR / "error.log",
        level="ERROR",
        **error_log_config,
    )

# ============================================================================
# 禁用第三方库噪音日志
# ============================================================================

logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

__all__ = ["logger"]
