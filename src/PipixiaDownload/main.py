# main.py
"""
主程序入口，负责解析命令行参数并调用核心业务逻辑。
Main program entry point, responsible for parsing command-line arguments and invoking core business logic.

用法 (Usage):
    ppx-download -l <分享链接> [-s 下载目录]
    ppx-download parse -t 皮皮虾 -l <分享链接> [-s 下载目录]
"""
import argparse
import logging
import sys
from typing import List, Optional

import requests

from PipixiaDownload.config import CHUNK_SIZE, DEFAULT_EXTENSION, LOG_DIR, LOG_NAME, TRUST_ALL_CERTS
from PipixiaDownload.models import ResolvedVideo
from PipixiaDownload.parser import (SOURCE_ALIASES, SOURCE_RESOLVERS, detect_source_type, get_resolver,
                                    normalize_source_type)
from PublicMethods.http_client import create_session
from PublicMethods.logger import get_logger, setup_log
from PublicMethods.m_download import ConsoleProgress, Downloader
from PublicMethods.tools import sanitize_filename

log = get_logger(__name__)


def _video_file_name(video: ResolvedVideo) -> Optional[str]:
    """以标题命名，标题清洗后为空则退回视频ID，仍为空交给下载器生成随机名"""
    name = sanitize_filename(video.title) or sanitize_filename(video.video_id)
    return name + DEFAULT_EXTENSION if name else None


def download_if_set(source_type: str, video: ResolvedVideo, save_dir: Optional[str],
                    session: requests.Session, logger: logging.Logger = log) -> Optional[str]:
    """指定了下载目录才下载，返回保存路径"""
    if not save_dir:
        logger.info(f"未指定下载目录,跳过 {source_type} {video.media_url} 下载")
        return None

    logger.info(f"正在下载 {source_type} {video.media_url} 到 {save_dir}")
    downloader = Downloader(session=session, chunk_size=CHUNK_SIZE, log=logger)
    progress = ConsoleProgress()
    try:
        return downloader.download(video.media_url, save_dir, _video_file_name(video), progress=progress)
    finally:
        progress.finish()


def run_parse(source_type: str, url: str, save_dir: Optional[str] = None,
              trust_all_certs: bool = TRUST_ALL_CERTS, logger: logging.Logger = log) -> Optional[str]:
    """
    解析并 (可选) 下载一个分享链接。

    预期内的失败只记录日志并返回 None；接口结构异常、下载失败等向上抛出。
    """
    normalized = normalize_source_type(source_type)
    if normalized not in SOURCE_RESOLVERS:
        logger.error(f"不支持的视频来源:{source_type}")
        return None

    with create_session(trust_all_certs=trust_all_certs) as session:
        resolver = get_resolver(normalized, session=session, log=logger)
        result = resolver.resolve(normalized, url)
        if not result.success:
            logger.error(f"解析 {normalized} 的链接 {url} 失败,原因:{result.message}")
            return None

        video = result.value
        logger.info(f"{normalized} 的链接 {url} 解析成功")
        logger.info(f" - 标题: {video.title}")
        logger.info(f" - 作者: {video.author}")
        logger.info(f" - 封面: {video.cover_url}")
        logger.info(f" - 视频: {video.media_url}")
        return download_if_set(normalized, video, save_dir, session, logger)


def run_default(url: str, save_dir: Optional[str] = None,
                trust_all_certs: bool = TRUST_ALL_CERTS, logger: logging.Logger = log) -> Optional[str]:
    """根据链接格式自动识别来源后解析"""
    source_type = detect_source_type(url)
    if source_type is None:
        logger.error(f"不支持的视频来源:{url}")
        return None
    share_url = SOURCE_RESOLVERS[source_type].extract_share_url(url)
    return run_parse(source_type, share_url, save_dir, trust_all_certs, logger)


def _add_common_arguments(parser: argparse.ArgumentParser, suppress_defaults: bool = False) -> None:
    """
    根命令与子命令共用的参数。
    子命令上的默认值为 SUPPRESS，避免覆盖写在子命令之前的同名参数。
    """
    def default(value):
        return argparse.SUPPRESS if suppress_defaults else value

    parser.add_argument("-l", "--url", default=default(None),
                        help="皮皮虾分享链接，或包含分享链接的文本 (Share URL or text containing it)")
    parser.add_argument("-s", "--save-dir", default=default(None),
                        help="视频保存目录，不指定则只解析不下载 (Download directory; omit to only resolve)")
    parser.add_argument("--log-level", default=default("INFO"), choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="日志级别 (默认: INFO)")
    tls_group = parser.add_mutually_exclusive_group()
    tls_group.add_argument("--insecure", dest="trust_all_certs", action="store_true", default=default(None),
                           help="不校验 TLS 证书 (Accept any TLS certificate)")
    tls_group.add_argument("--verify-tls", dest="trust_all_certs", action="store_false", default=default(None),
                           help="校验 TLS 证书 (Verify TLS certificates)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ppx-download",
        description="皮皮虾视频解析下载器 (Pipixia video resolver & downloader)",
    )
    _add_common_arguments(parser)

    subparsers = parser.add_subparsers(dest="command", metavar="{parse}")
    parse_parser = subparsers.add_parser(
        "parse",
        help="按指定来源解析视频链接 (Resolve a link with an explicit source type)",
        description="按指定来源解析视频链接 (Resolve a link with an explicit source type)",
    )
    parse_parser.add_argument("-t", "--type", required=True,
                              help=f"视频来源，如 皮皮虾 (Source type, one of: {', '.join(sorted(SOURCE_ALIASES))})")
    _add_common_arguments(parse_parser, suppress_defaults=True)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.url:
        parser.error("缺少视频链接，请使用 -l/--url 指定")

    setup_log(getattr(logging, args.log_level), LOG_NAME, LOG_DIR)
    trust_all_certs = TRUST_ALL_CERTS if args.trust_all_certs is None else args.trust_all_certs

    if args.command == "parse":
        run_parse(args.type, args.url, args.save_dir, trust_all_certs)
    else:
        run_default(args.url, args.save_dir, trust_all_certs)
    return 0


if __name__ == "__main__":
    sys.exit(main())
