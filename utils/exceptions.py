"""
Custom Exceptions
自定义异常类
"""
from typing import Optional


class NewsReelError(Exception):
    """新闻视频生成器基础异常类"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(NewsReelError):
    """配置错误"""
    pass


class FeedUnavailableError(NewsReelError):
    """内容源不可用 (非 2xx 或网络错误)"""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, kwargs)
        self.status_code = status_code


class NoContentError(NewsReelError):
    """过滤后没有可用条目"""
    pass


class RenderSurfaceUnavailableError(NewsReelError):
    """无法创建绘图表面"""
    pass


class EncoderFailureError(NewsReelError):
    """编码器拒绝输入或内部失败"""

    def __init__(self, message: str, exit_code: Optional[int] = None, **kwargs):
        super().__init__(message, kwargs)
        self.exit_code = exit_code


class PreconditionNotMetError(NewsReelError):
    """前置条件不满足，请求被同步拒绝"""
    pass


class PipelineBusyError(PreconditionNotMetError):
    """已有任务在执行"""
    pass
