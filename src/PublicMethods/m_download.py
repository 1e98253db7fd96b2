import os
import sys
import uuid
import time
import logging
from typing import Callable, Optional

import requests

from PublicMethods.tools import filename_from_content_disposition

logger = logging.getLogger(__name__)

# 进度回调: (已下载字节数, 总字节数)，总字节数未知时为 -1
ProgressCallback = Callable[[int, int], None]

CHUNK_SIZE = 8192
DEFAULT_EXTENSION = '.mp4'


def _sizeof_fmt(num: float, suffix: str = 'B') -> str:
    """
    将字节数转换为可读格式（如 1.23MB）。
    """
    if num < 0:
        return f"-{_sizeof_fmt(abs(num), suffix)}"

    for unit in ['', 'K', 'M', 'G', 'T', 'P']:
        if abs(num) < 1024.0:
            return f"{num:.2f}{unit}{suffix}"
        num /= 1024.0
    return f"{num:.2f}E{suffix}"


class ConsoleProgress:
    """
    在控制台单行刷新下载进度。
    Renders (current, total) byte counts as a single carriage-returned line.
    """

    def __init__(self, stream=None, width: int = 30, label: str = '下载进度'):
        self.stream = stream or sys.stdout
        self.width = width
        self.label = label
        self.start_time = time.time()
        self._rendered = False

    def __call__(self, current: int, total: int) -> None:
        elapsed_time = max(time.time() - self.start_time, 0.001)
        speed_str = _sizeof_fmt(current / elapsed_time) + '/s'

        if total > 0:
            ratio = min(current / total, 1.0)
            filled = int(self.width * ratio)
            bar = '─' * filled + ' ' * (self.width - filled)
            line = (f"\r{self.label}: [{bar}] {ratio * 100:6.2f}% "
                    f"{_sizeof_fmt(current)}/{_sizeof_fmt(total)} {speed_str}")
        else:
            line = f"\r{self.label}: {_sizeof_fmt(current)} (总大小未知) {speed_str}"

        self.stream.write(line)
        self.stream.flush()
        self._rendered = True

    def finish(self) -> None:
        """结束进度行，后续日志另起一行"""
        if self._rendered:
            self.stream.write('\n')
            self.stream.flush()
            self._rendered = False


class Downloader:
    """
    HTTP 文件下载器，单次请求、流式写盘，并按块回调下载进度。

    不做重试、不设超时、失败时不清理已写入的半成品文件。
    """

    def __init__(self, session: requests.Session, chunk_size: int = CHUNK_SIZE,
                 log: Optional[logging.Logger] = None):
        """
        参数:
            session (requests.Session): 复用的 Session，证书校验等配置由它决定，由调用方负责关闭。
            chunk_size (int): 每次读取的字节数。
            log (logging.Logger, optional): 日志记录器，默认使用模块 logger。
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size 必须大于0。")
        self.session = session
        self.chunk_size = chunk_size
        self.log = log or logger

    @staticmethod
    def _total_length(r: requests.Response) -> int:
        """Content-Length 优先，其次底层流自身的剩余长度，都拿不到时返回 -1"""
        content_length = r.headers.get('Content-Length')
        if content_length:
            try:
                return int(content_length)
            except ValueError:
                logger.warning(f"无法解析 Content-Length: {content_length}")

        length_remaining = getattr(r.raw, 'length_remaining', None)
        if isinstance(length_remaining, int) and length_remaining >= 0:
            return length_remaining
        return -1

    def download(
            self,
            url: str,
            directory: str,
            file_name: Optional[str] = None,
            progress: Optional[ProgressCallback] = None,
    ) -> str:
        """
        下载文件到指定目录。

        参数:
            url (str): 视频直链。
            directory (str): 保存目录，不存在时自动创建。
            file_name (str, optional): 文件名。为空时依次尝试 Content-Disposition、随机名 + .mp4。
            progress (ProgressCallback, optional): 每写入一块后以 (current, total) 调用。

        返回:
            str: 写入文件的绝对路径。

        抛出:
            requests.HTTPError: 响应状态码非 2xx，此时不会创建任何文件。
            requests.RequestException / urllib3.exceptions.HTTPError / OSError:
                传输或写盘过程中出错，半成品文件保留在磁盘上。
        """
        self.log.info(f"开始下载:{url}")
        download_start_time = time.perf_counter()

        with self.session.get(url, stream=True) as r:
            r.raise_for_status()

            file_name = file_name or filename_from_content_disposition(r.headers.get('Content-Disposition'))
            if not file_name:
                file_name = uuid.uuid4().hex + DEFAULT_EXTENSION

            os.makedirs(directory, exist_ok=True)
            path = os.path.abspath(os.path.join(directory, file_name))
            self.log.info(f"保存路径:{path}")

            total_length = self._total_length(r)
            self.log.debug(f"文件总大小: {_sizeof_fmt(total_length) if total_length >= 0 else '未知'}")

            total_read = 0
            progress_broken = False
            with open(path, 'wb') as f:
                # 按原始字节写盘，不解 Content-Encoding，与 Content-Length 计数一致
                for chunk in r.raw.stream(self.chunk_size, decode_content=False):
                    if not chunk:
                        continue
                    f.write(chunk)
                    total_read += len(chunk)

                    if progress is None or progress_broken:
                        continue
                    try:
                        progress(total_read, total_length)
                    except Exception as e:
                        # 进度显示只是辅助信息，不能影响下载本身
                        progress_broken = True
                        self.log.debug(f"进度回调异常，后续不再回调: {e}", exc_info=True)

        self.log.info(
            f"下载完成: {path} ({_sizeof_fmt(total_read)}, 总耗时: {time.perf_counter() - download_start_time:.2f}秒)")
        return path
