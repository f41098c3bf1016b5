import logging
from pydantic_settings import BaseSettings, SettingsConfigDict

class LogConfig(BaseSettings):
    """日誌配置管理"""

    model_config = SettingsConfigDict(env_prefix="WECHAT_LOG_", extra="ignore")

    LEVEL: str = "INFO"
    FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    FILE: str | None = None

    def setup(self, name: str = "wechat_digest") -> logging.Logger:
        """配置套件根 logger，模組內統一使用 logging.getLogger(__name__)"""
        logger = logging.getLogger(name)

        if not logger.handlers:
            formatter = logging.Formatter(self.FORMAT)

            # 控制台處理器
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

            # 檔案處理器
            if self.FILE:
                handler = logging.FileHandler(self.FILE, encoding="utf-8")
                handler.setFormatter(formatter)
                logger.addHandler(handler)

            logger.setLevel(getattr(logging, self.LEVEL.upper(), logging.INFO))

        return logger
