class WeChatDigestError(Exception):
    """基礎異常"""
    pass

class ConfigurationError(WeChatDigestError):
    """配置缺失或錯誤，啟動時即失敗"""
    pass

class BatchValidationError(WeChatDigestError):
    """批量請求參數錯誤"""
    pass

class ArticleExtractionError(WeChatDigestError):
    """文章內容提取失敗"""
    pass

class LLMRequestError(WeChatDigestError):
    """LLM 連接或超時異常"""
    pass

class LLMResponseError(WeChatDigestError):
    """LLM 響應異常"""
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"LLM API 錯誤 {status_code}: {message}")

class SummarizationError(WeChatDigestError):
    """文章總結失敗"""
    pass
