import os
import re
from typing import Optional
from urllib.parse import unquote

# Windows/Linux 文件名中不允许出现的字符
INVALID_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1F]+')


def sanitize_filename(name: str, fallback: str = '') -> str:
    """
    去掉文件名中的非法字符与换行，结果为空时返回 fallback。
    """
    name = (name or '').replace('\n', ' ').replace('\r', ' ')
    name = INVALID_FILENAME_CHARS.sub('', name)
    name = re.sub(r'\s+', ' ', name).strip(' .')
    return name or fallback


def filename_from_content_disposition(header: Optional[str]) -> Optional[str]:
    """
    从 Content-Disposition 响应头中取出文件名，优先 RFC 5987 的 filename*。
    只保留最后一段路径，防止写到目标目录之外。

        >>> filename_from_content_disposition('attachment; filename="a.mp4"')
        'a.mp4'
    """
    if not header:
        return None

    match = re.search(r"filename\*\s*=\s*([^']*)'[^']*'([^;]+)", header, re.IGNORECASE)
    if match:
        encoding = match.group(1) or 'utf-8'
        try:
            name = unquote(match.group(2).strip().strip('"'), encoding=encoding)
        except LookupError:
            name = unquote(match.group(2).strip().strip('"'))
    else:
        match = re.search(r'filename\s*=\s*("([^"]*)"|[^;]+)', header, re.IGNORECASE)
        if not match:
            return None
        name = match.group(2) if match.group(2) is not None else match.group(1).strip()

    name = os.path.basename(name.replace('\\', '/')).strip()
    return name or None
