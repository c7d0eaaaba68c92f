"""URL slug生成工具，基于内置拼音表的逐字转写"""

import re
from types import MappingProxyType

SLUG_MAX_LENGTH = 50
UNTITLED_SLUG = "untitled"
HANZI_PLACEHOLDER = "hanzi"
CJK_START = 0x4E00
CJK_END = 0x9FFF

# 常用汉字 -> 拼音（无声调）
PINYIN_MAP = MappingProxyType(
    {
        "一": "yi", "二": "er", "三": "san", "四": "si", "五": "wu",
        "六": "liu", "七": "qi", "八": "ba", "九": "jiu", "十": "shi",
        "的": "de", "了": "le", "在": "zai", "是": "shi", "我": "wo",
        "有": "you", "和": "he", "就": "jiu", "不": "bu", "人": "ren",
        "这": "zhe", "中": "zhong", "大": "da", "为": "wei", "上": "shang",
        "个": "ge", "国": "guo", "以": "yi", "到": "dao", "说": "shuo",
        "要": "yao", "时": "shi", "来": "lai", "用": "yong", "们": "men",
        "生": "sheng", "地": "di", "出": "chu", "分": "fen", "对": "dui",
        "成": "cheng", "会": "hui", "可": "ke", "主": "zhu", "发": "fa",
        "年": "nian", "动": "dong", "同": "tong", "工": "gong", "也": "ye",
        "能": "neng", "下": "xia", "过": "guo", "子": "zi", "他": "ta",
        "它": "ta", "着": "zhe", "无": "wu", "学": "xue", "文": "wen",
        "明": "ming", "理": "li", "知": "zhi", "道": "dao", "得": "de",
        "行": "xing", "面": "mian", "方": "fang", "高": "gao", "长": "chang",
        "现": "xian", "回": "hui", "开": "kai", "关": "guan", "好": "hao",
        "多": "duo", "少": "shao", "小": "xiao", "钱": "qian", "美": "mei",
        "新": "xin", "老": "lao", "坏": "huai", "快": "kuai", "慢": "man",
        "热": "re", "冷": "leng", "红": "hong", "绿": "lv", "蓝": "lan",
        "黄": "huang", "白": "bai", "黑": "hei", "灰": "hui", "紫": "zi",
        "粉": "fen", "橙": "cheng", "赚": "zhuan", "金": "jin", "元": "yuan",
        "块": "kuai", "毛": "mao", "角": "jiao", "万": "wan", "千": "qian",
        "百": "bai", "亿": "yi", "兆": "zhao", "京": "jing", "垓": "gai",
        "秭": "zi", "穰": "rang", "沟": "gou", "涧": "jian", "正": "zheng",
        "载": "zai", "极": "ji",
    }
)

_ASCII_ALNUM = re.compile(r"[a-zA-Z0-9]")
_NON_SLUG_CHARS = re.compile(r"[^a-zA-Z0-9_-]")
_HYPHEN_RUN = re.compile(r"-+")


def transliterate(char: str) -> str:
    """
    单个字符转写为拼音/ASCII

    查找顺序：拼音表 -> ASCII字母数字（转小写） -> 其余汉字统一为 "hanzi" -> 其他字符为 "_"
    """
    syllable = PINYIN_MAP.get(char)
    if syllable:
        return syllable
    if _ASCII_ALNUM.fullmatch(char):
        return char.lower()
    if len(char) == 1 and CJK_START <= ord(char) <= CJK_END:
        return HANZI_PLACEHOLDER
    return "_"


def to_pinyin(text: str) -> str:
    # 音节之间不加分隔符
    return "".join(transliterate(char) for char in text)


def generate_slug(title: str) -> str:
    """
    将标题转换为拼音slug

    示例：
        "赚钱" -> "zhuanqian"
        "Hello World" -> "hello_world"

    Args:
        title: 文章或标签标题

    Returns:
        只包含 [a-z0-9_-] 且不超过50个字符的slug，结果为空时返回 "untitled"
    """
    slug = to_pinyin(title or "")
    slug = _NON_SLUG_CHARS.sub("-", slug)
    slug = _HYPHEN_RUN.sub("-", slug)
    slug = slug.strip("-")

    if len(slug) > SLUG_MAX_LENGTH:
        slug = slug[:SLUG_MAX_LENGTH].rstrip("-")

    return slug or UNTITLED_SLUG


def generate_article_slug(title: str, article_id: str) -> str:
    """
    生成带ID后缀的文章slug: {pinyin}-{short_id}

    用于slug与已有记录冲突时区分。

    示例：
        title="赚钱", article_id="550e8400-e29b-41d4-a716-446655440000"
        -> "zhuanqian-550e8400"
    """
    slug = generate_slug(title)
    short_id = article_id.split("-")[0]
    return f"{slug}-{short_id}"
