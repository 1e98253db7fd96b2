"""
统一创建 requests.Session，集中处理代理与证书校验开关。
"""
import logging

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

logger = logging.getLogger(__name__)


def create_session(trust_all_certs: bool = False, trust_env: bool = True) -> requests.Session:
    """
    创建一个配置好的 Session。

    参数:
        trust_all_certs (bool): 是否放行任何 TLS 证书。必须由调用方显式开启，
                                开启后会关闭 urllib3 的 InsecureRequestWarning。
        trust_env (bool): 是否读取系统代理等环境配置。

    返回:
        requests.Session: 调用方负责关闭 (推荐 with 语句)。
    """
    session = requests.Session()
    session.trust_env = trust_env
    if trust_all_certs:
        session.verify = False
        urllib3.disable_warnings(InsecureRequestWarning)
        logger.debug("已关闭 TLS 证书校验 (trust_all_certs=True)")
    return session
