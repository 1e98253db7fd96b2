# config.py
"""
该文件用于存放皮皮虾解析下载的所有配置和常量。
This file stores all configurations and constants for the Pipixia downloader.
"""
import os

from dotenv import load_dotenv

# 从 .env 读取配置
load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# 元数据接口请求超时 (秒), 下载请求不设超时
# Timeout for the redirect and metadata calls (seconds); the download itself has none
REQUEST_TIMEOUT = 5

# 皮皮虾接口会拒绝默认客户端，必须伪装成手机浏览器
# The upstream API rejects default clients, so a mobile Safari UA is required
MOBILE_USER_AGENT = (
    'Mozilla/5.0 (iPhone; CPU iPhone OS 11_0 like Mac OS X) '
    'AppleWebKit/604.1.38 (KHTML, like Gecko) '
    'Version/11.0 Mobile/15A372 Safari/604.1'
)
DETAIL_HEADERS = {'User-Agent': MOBILE_USER_AGENT}

# 作品详情接口, cell_id 为分享链接重定向后得到的作品ID
# Item detail API, cell_id is the content id taken from the share link redirect
DETAIL_API_URL = (
    'https://is.snssdk.com/bds/cell/detail/'
    '?cell_type=1&aid=1319&app_name=super&cell_id={item_id}'
)

# 分享链接 与 重定向Location 的匹配规则
SHARE_URL_PATTERN = r'https?://h5\.pipix\.com/\S*'
ITEM_ID_PATTERN = r'/item/(?P<id>\d+)\?'

# 流式下载的块大小
CHUNK_SIZE = 8192
DEFAULT_EXTENSION = '.mp4'

# 是否信任所有证书 (上游证书链不可靠，默认放行)
# Accept any TLS certificate; the platform's chain is not trustworthy for this purpose
TRUST_ALL_CERTS = _env_flag('PPX_TRUST_ALL_CERTS', True)

# 日志目录
LOG_DIR = os.getenv('PPX_LOG_DIR', 'Logs')
LOG_NAME = 'PipixiaDownloader'
