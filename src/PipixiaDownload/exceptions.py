# exceptions.py
"""
定义项目专用的自定义异常类型。
Defines custom exception types for the project.
"""


class PipixiaDownloadException(Exception):
    """项目所有异常的基类 (Base exception for the project)"""
    pass


class URLExtractionError(PipixiaDownloadException):
    """无法从输入文本中提取有效的皮皮虾URL (Failed to extract a valid Pipixia URL)"""
    pass


class UnsupportedSourceError(PipixiaDownloadException):
    """不支持的视频来源 (No resolver is registered for the source type)"""
    pass


class ParseError(PipixiaDownloadException):
    """解析API响应失败或数据不完整 (Failed to parse API response or data is incomplete)"""
    pass


class UnexpectedResponseError(ParseError):
    """
    接口返回的JSON结构与预期不符，说明上游契约发生了变化。
    The JSON returned by the API does not have the expected shape.

    Attributes:
        path (str): 出问题的字段路径，如 'data.data.item.video.video_id'.
        reason (str): 缺失 / 类型错误 等描述.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"字段 {path} 异常: {reason}")
