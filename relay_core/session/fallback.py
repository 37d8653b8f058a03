"""
两步尝试：主方式失败时改用备用方式
用于打开外部链接和复制到剪贴板，两种结果都记录日志，不向调用方抛出异常
"""

import shutil
import subprocess
import sys
import webbrowser
from typing import Callable, Optional

from relay_core.utils.logger import get_logger

logger = get_logger(__name__)

# 返回 True 表示成功，返回 False 或抛出异常表示失败
Attempt = Callable[[], bool]


def _run_attempt(attempt: Attempt) -> tuple[bool, Optional[str]]:
    try:
        return bool(attempt()), None
    except Exception as e:
        return False, str(e)


def attempt_with_fallback(action: str, primary: Attempt, fallback: Optional[Attempt] = None) -> bool:
    """
    先执行主方式，失败后执行备用方式

    Args:
        action: 操作名称，写入日志
        primary: 主方式
        fallback: 备用方式

    Returns:
        任一方式成功时返回 True
    """
    ok, error = _run_attempt(primary)
    if ok:
        logger.debug(f"{action} 成功", action=action, method="primary")
        return True
    logger.warning(f"{action} 主方式失败: {error or 'returned false'}", action=action, method="primary")

    if fallback is None:
        return False

    ok, error = _run_attempt(fallback)
    if ok:
        logger.info(f"{action} 备用方式成功", action=action, method="fallback")
        return True
    logger.error(f"{action} 备用方式失败: {error or 'returned false'}", action=action, method="fallback")
    return False


def _system_open_command(url: str) -> list[str]:
    if sys.platform == "darwin":
        return ["open", url]
    if sys.platform.startswith("win"):
        return ["cmd", "/c", "start", "", url]
    return ["xdg-open", url]


def system_open(url: str) -> bool:
    """通过系统命令打开链接"""
    command = _system_open_command(url)
    if not shutil.which(command[0]):
        raise FileNotFoundError(f"{command[0]} not available")
    subprocess.Popen(command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    return True


def open_external(
    url: str,
    primary: Optional[Callable[[str], bool]] = None,
    fallback: Optional[Callable[[str], bool]] = None,
) -> bool:
    """在外部浏览器中打开链接，默认先用 webbrowser 再用系统命令"""
    primary = primary or webbrowser.open_new_tab
    fallback = fallback or system_open
    return attempt_with_fallback(
        "open_external", lambda: primary(url), lambda: fallback(url)
    )


def _clipboard_command() -> Optional[list[str]]:
    if sys.platform == "darwin":
        return ["pbcopy"]
    if sys.platform.startswith("win"):
        return ["clip"]
    for command in (["wl-copy"], ["xclip", "-selection", "clipboard"], ["xsel", "--clipboard", "--input"]):
        if shutil.which(command[0]):
            return command
    return None


def system_clipboard(text: str) -> bool:
    """通过系统命令写入剪贴板"""
    command = _clipboard_command()
    if command is None:
        raise FileNotFoundError("no clipboard command available")
    subprocess.run(command, input=text.encode("utf-8"), check=True, timeout=5)
    return True


def copy_text(
    text: str,
    primary: Optional[Callable[[str], bool]] = None,
    fallback: Optional[Callable[[str], bool]] = None,
) -> bool:
    """复制文本到剪贴板"""
    primary = primary or system_clipboard
    return attempt_with_fallback(
        "copy_to_clipboard",
        lambda: primary(text),
        (lambda: fallback(text)) if fallback else None,
    )
