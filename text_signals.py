"""
Lightweight linguistic signals extracted from raw keyword text
"""
import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

from utils import normalize_keyword_text

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"[a-z0-9]+(?:[&'][a-z0-9]+)*")
CJK_PATTERN = re.compile(r"[一-鿿]")

# Question markers, keyed by the kind of question they signal.
# Multi-word entries match as phrases, single words as whole tokens.
QUESTION_MARKERS: Dict[str, Tuple[str, ...]] = {
    "how_to": ("how to", "how do", "how can", "how does"),
    "comparison": ("vs", "versus", "compare", "comparison", "difference", "differences"),
    "interrogative": ("what", "why", "when", "where", "which", "who", "how"),
    "evaluative": ("best", "review", "reviews", "guide", "top"),
    "definition": ("is", "definition", "meaning", "means"),
}

CJK_QUESTION_MARKERS: Dict[str, Tuple[str, ...]] = {
    "how_to": ("如何", "怎么", "怎样"),
    "comparison": ("对比", "区别", "比较"),
    "interrogative": ("什么", "为什么", "哪个", "哪里"),
    "evaluative": ("最好", "评测", "指南"),
    "definition": ("定义", "意思"),
}

INTENT_MARKERS: Dict[str, Tuple[str, ...]] = {
    "informational": ("guide", "tutorial", "tips", "advice", "learn", "understand",
                      "explain", "overview", "introduction", "basics", "fundamentals",
                      "how", "what", "why", "setup", "install", "troubleshooting"),
    "comparative": ("vs", "versus", "compare", "comparison", "difference", "best",
                    "review", "reviews", "top", "alternative", "alternatives"),
    "transactional": ("buy", "price", "prices", "pricing", "cost", "deal", "deals",
                      "discount", "cheap", "coupon", "sale", "order"),
    "navigational": ("official", "website", "login", "download", "app"),
}

CJK_INTENT_MARKERS: Dict[str, Tuple[str, ...]] = {
    "informational": ("教程", "指南", "技巧", "如何", "什么"),
    "comparative": ("对比", "评测", "最好"),
    "transactional": ("购买", "价格", "优惠"),
    "navigational": ("官网", "登录", "下载"),
}

STRUCTURE_MARKERS: Dict[str, Tuple[str, ...]] = {
    "how_to": ("how to", "step", "steps", "process", "guide", "setup", "install",
               "installation", "tutorial"),
    "troubleshooting": ("troubleshooting", "troubleshoot", "fix", "error", "problem",
                        "problems", "repair", "not working"),
    "faq": ("faq", "faqs", "q&a", "questions"),
    "list": ("list", "top", "best", "ideas", "tips", "ways", "parts", "examples", "types"),
    "comparison": ("vs", "versus", "compare", "comparison", "difference", "alternatives"),
}

CJK_STRUCTURE_MARKERS: Dict[str, Tuple[str, ...]] = {
    "how_to": ("步骤", "教程", "安装", "设置"),
    "troubleshooting": ("故障", "修复", "无法"),
    "faq": ("常见问题",),
    "list": ("排行", "推荐"),
    "comparison": ("对比", "区别"),
}

LEADING_QUESTION_WORDS = frozenset(("how", "what", "why", "when", "where", "which", "who",
                                    "can", "does", "do", "is", "are", "should"))


@dataclass(frozen=True)
class TextSignals:
    """Signals derived from one keyword phrase"""
    normalized: str
    tokens: Tuple[str, ...]
    token_count: int
    question_markers: FrozenSet[str]
    intent_classes: FrozenSet[str]
    structure_cues: FrozenSet[str]
    has_number: bool
    is_question: bool

    @property
    def is_empty(self) -> bool:
        return self.token_count == 0


class TextSignalExtractor:
    """Derives question, intent and answer-shape cues from keyword text"""

    def extract(self, text: str) -> TextSignals:
        normalized = normalize_keyword_text(text)
        tokens = tuple(TOKEN_PATTERN.findall(normalized))
        cjk_chars = len(CJK_PATTERN.findall(normalized))
        token_count = len(tokens) + math.ceil(cjk_chars / 2)

        padded = f" {' '.join(tokens)} "
        token_set = frozenset(tokens)

        question_markers = self._match(padded, token_set, normalized, QUESTION_MARKERS, CJK_QUESTION_MARKERS)
        intent_classes = self._match(padded, token_set, normalized, INTENT_MARKERS, CJK_INTENT_MARKERS)
        structure_cues = self._match(padded, token_set, normalized, STRUCTURE_MARKERS, CJK_STRUCTURE_MARKERS)

        is_question = (
            normalized.endswith("?")
            or normalized.endswith("？")
            or (bool(tokens) and tokens[0] in LEADING_QUESTION_WORDS)
            or "how_to" in question_markers
            or "interrogative" in question_markers
        )

        signals = TextSignals(
            normalized=normalized,
            tokens=tokens,
            token_count=token_count,
            question_markers=question_markers,
            intent_classes=intent_classes,
            structure_cues=structure_cues,
            has_number=any(ch.isdigit() for ch in normalized),
            is_question=is_question,
        )
        logger.debug(f"Extracted signals for '{normalized}': {token_count} tokens, "
                     f"intents={sorted(intent_classes)}")
        return signals

    @staticmethod
    def _match(padded: str, token_set: FrozenSet[str], normalized: str,
               markers: Dict[str, Tuple[str, ...]],
               cjk_markers: Dict[str, Tuple[str, ...]]) -> FrozenSet[str]:
        matched = set()
        for category, words in markers.items():
            for word in words:
                if " " in word:
                    found = f" {word} " in padded
                else:
                    found = word in token_set
                if found:
                    matched.add(category)
                    break
        for category, words in cjk_markers.items():
            if any(word in normalized for word in words):
                matched.add(category)
        return frozenset(matched)
