"""根据标题和正文自动生成文章标签"""

import re

MAX_AUTO_TAGS = 3
MAX_FALLBACK_TAGS = 2
FALLBACK_MIN_LENGTH = 2
FALLBACK_MAX_LENGTH = 6

TAG_VOCABULARY = (
    "赚钱", "美金", "美元", "投资", "理财", "创业", "副业", "兼职", "工作", "职业",
    "技能", "学习", "教育", "培训", "课程", "教程", "方法", "技巧", "经验", "分享",
    "工具", "软件", "应用", "网站", "平台", "服务", "产品", "项目", "机会", "资源",
    "网络", "互联网", "电商", "营销", "推广", "销售", "客户", "用户", "市场", "行业",
    "技术", "开发", "编程", "设计", "运营", "管理", "团队", "合作", "伙伴", "朋友",
    "AI", "人工智能", "ChatGPT", "自动化", "效率", "优化", "增长", "变现", "收入",
)

_TITLE_DELIMITERS = re.compile(r"[\s，。！？；：“”‘’\"'（）【】]")


def match_keywords(text: str) -> list[str]:
    """按词表顺序返回出现在文本中的关键词（子串匹配，区分大小写）"""
    if not text:
        return []
    return [keyword for keyword in TAG_VOCABULARY if keyword in text]


def split_title_segments(title: str) -> list[str]:
    segments: list[str] = []
    for segment in _TITLE_DELIMITERS.split(title or ""):
        if FALLBACK_MIN_LENGTH <= len(segment) <= FALLBACK_MAX_LENGTH:
            segments.append(segment)
            if len(segments) >= MAX_FALLBACK_TAGS:
                break
    return segments


def generate_tags(title: str, content: str) -> list[str]:
    """
    自动生成标签

    先在标题、再在正文中匹配词表，合并去重后取前3个；
    一个关键词都没有命中时，从标题切分出长度2-6的片段，取前2个。
    """
    keywords = match_keywords(title) + match_keywords(content)
    if not keywords:
        return split_title_segments(title)
    return list(dict.fromkeys(keywords))[:MAX_AUTO_TAGS]
