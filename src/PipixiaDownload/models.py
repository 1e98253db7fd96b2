# models.py
"""
定义数据模型，用于结构化地表示业务对象。
Defines data models to structurally represent business objects.
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class ResolvedVideo:
    """
    解析成功后得到的作品信息。
    Normalized record extracted from the platform metadata.

    Attributes:
        title (str): 作品文案，为空时使用 video_id.
        media_url (str): 无水印视频直链.
        cover_url (str): 封面图地址.
        author (str): 作者昵称.
        video_id (str): 平台视频ID.
    """
    title: str
    media_url: str
    cover_url: str
    author: str
    video_id: str = ''


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    预期内失败使用的结果对象，代替抛异常。
    Success-or-failure value for anticipated failure paths.
    """
    success: bool
    value: Optional[T] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> 'Outcome[T]':
        return cls(success=True, value=value)

    @classmethod
    def error(cls, message: str) -> 'Outcome[T]':
        return cls(success=False, message=message)

    def __bool__(self) -> bool:
        return self.success
