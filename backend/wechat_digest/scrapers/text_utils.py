"""
Text helpers for WeChat article extraction
"""

import re
from datetime import datetime
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# 依序嘗試，第一個成功的格式為準
FULL_DATE_PATTERNS = [
    re.compile(r"(\d{4})年(\d{1,2})月(\d{1,2})日"),
    re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})"),
]
MONTH_DAY_PATTERN = re.compile(r"(\d{1,2})月(\d{1,2})日")

_HORIZONTAL_WHITESPACE = re.compile(r"[^\S\n]+")
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def parse_chinese_date(date_str: str, today: Optional[datetime] = None) -> Optional[datetime]:
    """
    解析中文日期字串

    Supports ``2024年3月5日``, ``2024-3-5`` and ``3月5日`` (current year).

    Args:
        date_str: 日期文字
        today: 用於補全年份的當前時間，預設為 datetime.now()

    Returns:
        Optional[datetime]: 解析結果，無法解析時返回 None
    """
    if not date_str:
        return None

    candidates = [(pattern, None) for pattern in FULL_DATE_PATTERNS]
    candidates.append((MONTH_DAY_PATTERN, (today or datetime.now()).year))

    for pattern, default_year in candidates:
        match = pattern.search(date_str)
        if not match:
            continue
        try:
            if default_year is None:
                year, month, day = (int(g) for g in match.groups())
            else:
                year = default_year
                month, day = (int(g) for g in match.groups())
            return datetime(year, month, day)
        except ValueError:
            # 已匹配但日期無效，不再退回到其他格式
            logger.warning(f"日期解析失敗: {date_str}")
            return None

    return None


def clean_content(content: str, max_length: int = 15000) -> str:
    """
    清理文章內容：合併空白、規範段落分隔並限制長度

    Idempotent: ``clean_content(clean_content(x)) == clean_content(x)``.
    """
    text = content.replace("\r\n", "\n").replace("\r", "\n")
    text = _HORIZONTAL_WHITESPACE.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = _EXTRA_BLANK_LINES.sub("\n\n", text)
    return text.strip()[:max_length].rstrip()
