# parser.py
"""
负责从皮皮虾分享链接解析出视频的详细信息。
Responsible for resolving a Pipixia share link into video details.
"""
import json
import re
import logging
from typing import Any, Dict, Optional, Type
from urllib.parse import urlparse

import requests

from PipixiaDownload.config import (DETAIL_API_URL, DETAIL_HEADERS, ITEM_ID_PATTERN, REQUEST_TIMEOUT,
                                    SHARE_URL_PATTERN)
from PipixiaDownload.exceptions import URLExtractionError, UnexpectedResponseError, UnsupportedSourceError
from PipixiaDownload.models import Outcome, ResolvedVideo

logger = logging.getLogger(__name__)

RESOLVE_FAILED_MSG = "无法解析视频链接"

ITEM_PATH = 'data.data.item'
MEDIA_URL_PATH = f"{ITEM_PATH}.origin_video_download.url_list.0.url"


def _dig(node: Any, path: str, expected: Optional[type] = str) -> Any:
    """
    按点分路径逐层取值，纯数字的段作为列表下标。
    任意一层缺失或最终类型不符时抛出 UnexpectedResponseError，携带出错的路径。

        >>> _dig({"a": [{"b": "x"}]}, "a.0.b")
        'x'
    """
    current = node
    walked = []
    for key in path.split('.'):
        walked.append(key)
        try:
            if key.isdigit() and isinstance(current, list):
                current = current[int(key)]
            else:
                current = current[key]
        except (KeyError, IndexError, TypeError):
            raise UnexpectedResponseError('.'.join(walked), '字段缺失')
        if current is None:
            raise UnexpectedResponseError('.'.join(walked), '字段为 null')

    if expected is not None and not isinstance(current, expected):
        raise UnexpectedResponseError(
            path, f'类型应为 {expected.__name__}, 实际为 {type(current).__name__}')
    return current


class PipixiaParser:
    """
    皮皮虾分享链接解析器。
    先禁止重定向拿到 Location 中的作品ID，再请求作品详情接口并解析JSON。
    """

    source_type = 'pipixia'

    def __init__(self, session: requests.Session, log: Optional[logging.Logger] = None,
                 timeout: float = REQUEST_TIMEOUT):
        """
        :param session: 复用的 Session，证书校验开关与关闭都由创建方负责 (Shared session, owned and closed by its creator).
        :param log: 日志记录器，默认使用模块 logger (Logging collaborator).
        :param timeout: 重定向与详情接口的超时时间，秒 (Timeout for both metadata calls, seconds).
        """
        self.session = session
        self.log = log or logger
        self.timeout = timeout

    @staticmethod
    def matches(text: str) -> bool:
        """判断文本中是否包含皮皮虾分享链接"""
        return bool(re.search(SHARE_URL_PATTERN, text or ''))

    @staticmethod
    def extract_share_url(text: str) -> str:
        """
        从输入文本中正则匹配出皮皮虾分享链接。
        Extracts a Pipixia share URL from the input text using regex.
        """
        match = re.search(SHARE_URL_PATTERN, text or '')
        if not match:
            raise URLExtractionError(f'未从输入中识别到有效的皮皮虾分享链接: "{text}"')
        return match.group(0)

    def _get_location(self, url: str) -> Optional[str]:
        """请求分享链接但不跟随跳转，返回 Location 响应头"""
        with self.session.get(url, allow_redirects=False, timeout=self.timeout) as resp:
            location = resp.headers.get('Location')
        self.log.debug(f"分享链接 {url} 的 Location: {location}")
        return location

    def _fetch_detail(self, item_id: str) -> str:
        api_url = DETAIL_API_URL.format(item_id=item_id)
        self.log.debug(f"请求作品详情接口: {api_url}")
        with self.session.get(api_url, headers=DETAIL_HEADERS, timeout=self.timeout) as resp:
            return resp.text

    @staticmethod
    def _load_json(text: str) -> Any:
        try:
            return json.loads(text)
        except ValueError as e:
            raise UnexpectedResponseError('$', f'响应不是合法的JSON: {e}') from e

    @staticmethod
    def _build_video(payload: Dict[str, Any]) -> ResolvedVideo:
        media_url = _dig(payload, MEDIA_URL_PATH)
        parsed = urlparse(media_url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise UnexpectedResponseError(MEDIA_URL_PATH, f'不是有效的视频地址: "{media_url}"')
        title = _dig(payload, f"{ITEM_PATH}.content")
        video_id = _dig(payload, f"{ITEM_PATH}.video.video_id")
        author = _dig(payload, f"{ITEM_PATH}.author.name")
        cover_url = _dig(payload, f"{ITEM_PATH}.cover.url_list.0.url")
        return ResolvedVideo(
            title=title or video_id,
            media_url=media_url,
            cover_url=cover_url,
            author=author,
            video_id=video_id,
        )

    def resolve(self, source_type: str, share_url: str) -> Outcome[ResolvedVideo]:
        """
        解析分享链接。

        预期内的失败 (链接无效、接口返回空、接口返回错误码) 以 Outcome.error 返回；
        JSON 结构不符合预期时记录原始响应后抛出 UnexpectedResponseError。
        """
        location = self._get_location(share_url)
        m = re.search(ITEM_ID_PATTERN, location or '')
        if not m:
            self.log.error(f"无法解析 {source_type}->{share_url},获取Location失败")
            return Outcome.error(RESOLVE_FAILED_MSG)

        item_id = m.group('id')
        self.log.debug(f"作品ID: {item_id}")

        output_string = self._fetch_detail(item_id)
        if not output_string:
            self.log.error(f"无法解析 {source_type}->{share_url},获取视频信息失败")
            return Outcome.error(RESOLVE_FAILED_MSG)

        try:
            payload = self._load_json(output_string)
            status_code = _dig(payload, 'status_code', expected=int)
            if status_code != 0:
                message = _dig(payload, 'message')
                return Outcome.error(f"解析失败,错误代码:{status_code},原因:{message}")

            video = self._build_video(payload)
        except UnexpectedResponseError as e:
            self.log.error(
                f"解析 {source_type}->{share_url} 失败,原因:{e},原始响应:{output_string}", exc_info=True)
            raise

        self.log.debug(f"作品 {item_id} 解析完成, vid:{video.video_id}")
        return Outcome.ok(video)


# 来源标识 -> 解析器，新增平台时在此注册
SOURCE_RESOLVERS: Dict[str, Type[PipixiaParser]] = {
    PipixiaParser.source_type: PipixiaParser,
}

SOURCE_ALIASES: Dict[str, str] = {
    'pipixia': 'pipixia',
    'ppx': 'pipixia',
    '皮皮虾': 'pipixia',
}


def normalize_source_type(source_type: Optional[str]) -> Optional[str]:
    """把用户输入的来源 (如 '皮皮虾'、'PPX') 归一为注册表中的标识，不支持时返回 None"""
    if not source_type:
        return None
    return SOURCE_ALIASES.get(source_type.strip().lower())


def detect_source_type(text: str) -> Optional[str]:
    """根据链接格式判断来源"""
    for source_type, resolver_cls in SOURCE_RESOLVERS.items():
        if resolver_cls.matches(text):
            return source_type
    return None


def get_resolver(source_type: str, session: requests.Session,
                 log: Optional[logging.Logger] = None) -> PipixiaParser:
    """
    按来源标识创建解析器。

    抛出:
        UnsupportedSourceError: 来源未注册。
    """
    normalized = normalize_source_type(source_type)
    if normalized is None or normalized not in SOURCE_RESOLVERS:
        raise UnsupportedSourceError(f"不支持的视频来源:{source_type}")
    return SOURCE_RESOLVERS[normalized](session=session, log=log)
