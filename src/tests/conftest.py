# -*- coding: utf-8 -*-
"""
测试公共夹具：构造不走网络的 requests.Response / Session。
"""
import io
import json
from unittest.mock import Mock

import pytest
import requests
from requests.structures import CaseInsensitiveDict
from urllib3.response import HTTPResponse

SHARE_URL = "https://h5.pipix.com/s/abc123/"
REDIRECT_LOCATION = "https://h5.pipix.com/item/123456?foo=bar"
MEDIA_URL = "https://cdn/video.mp4"

DETAIL_PAYLOAD = {
    "status_code": 0,
    "data": {
        "data": {
            "item": {
                "content": "My Clip",
                "origin_video_download": {"url_list": [{"url": MEDIA_URL}]},
                "video": {"video_id": "123456"},
                "author": {"name": "alice"},
                "cover": {"url_list": [{"url": "https://cdn/cover.jpg"}]},
            }
        }
    },
}


class ChunkedStream(io.BytesIO):
    """每次 read 最多返回 step 字节，模拟网络分块到达"""

    def __init__(self, data: bytes, step: int):
        super().__init__(data)
        self.step = step

    def read(self, size=-1):
        if size is None or size < 0:
            return super().read()
        return super().read(min(size, self.step))


def make_response(status_code=200, body=b"", headers=None, url="https://example.com/", step=None):
    """构造一个真实的 requests.Response，底层是 urllib3 的 HTTPResponse，body 可按 step 分块读取"""
    if isinstance(body, str):
        body = body.encode("utf-8")
    resp = requests.Response()
    resp.status_code = status_code
    resp.headers = CaseInsensitiveDict(headers or {})
    resp.raw = HTTPResponse(
        body=ChunkedStream(body, step) if step else io.BytesIO(body),
        headers=headers or {},
        status=status_code,
        preload_content=False,
    )
    resp.url = url
    resp.encoding = "utf-8"
    resp.reason = "OK" if status_code < 400 else "Error"
    return resp


def redirect_response(location=REDIRECT_LOCATION):
    headers = {"Location": location} if location is not None else {}
    return make_response(302, headers=headers, url=SHARE_URL)


def detail_response(payload=None, raw_text=None):
    text = raw_text if raw_text is not None else json.dumps(payload if payload is not None else DETAIL_PAYLOAD)
    return make_response(200, body=text, headers={"Content-Type": "application/json"})


@pytest.fixture
def detail_payload():
    """每个测试拿到一份可随意修改的详情接口响应"""
    return json.loads(json.dumps(DETAIL_PAYLOAD))


@pytest.fixture
def fake_session():
    """真实的 Session 对象，只替换 get，保证 with 语句等行为一致"""
    session = requests.Session()
    session.get = Mock()
    return session
