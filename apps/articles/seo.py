"""
On-page SEO checks for the article editor.

Each check scores 0-10. The overall score is the plain average of the
checks that ran (the keyword check only runs when a focus keyword is given).
"""

import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

TAG_RE = re.compile(r'<[^>]*>')

META_TITLE_MAX = 60
META_TITLE_MIN = 10
META_DESCRIPTION_MAX = 160
META_DESCRIPTION_MIN = 50


@dataclass
class SeoCheck:
    identifier: str
    score: int
    text: str
    status: str  # good | ok | bad


def _status_for(score: int) -> str:
    if score > 7:
        return 'good'
    if score > 4:
        return 'ok'
    return 'bad'


def strip_tags(html: str) -> str:
    return TAG_RE.sub(' ', html or '')


def count_words(html: str) -> int:
    return len(strip_tags(html).split())


def check_word_count(content: str) -> SeoCheck:
    words = count_words(content)
    if words > 300:
        score = 10
    elif words > 200:
        score = 6
    else:
        score = 3
    return SeoCheck(
        identifier='wordCount',
        score=score,
        text=f"Word count: {words} (Recommended: 300+).",
        status=_status_for(score),
    )


def check_keyword_in_title(keyword: str, title: str, meta_title: Optional[str]) -> SeoCheck:
    target = meta_title or title or ''
    found = keyword.lower() in target.lower()
    return SeoCheck(
        identifier='keywordInTitle',
        score=10 if found else 0,
        text="Focus keyword found in title." if found else "Focus keyword missing from title.",
        status='good' if found else 'bad',
    )


def check_meta_title(meta_title: Optional[str]) -> SeoCheck:
    if not meta_title:
        return SeoCheck(
            identifier='metaTitleLength',
            score=5,
            text="No custom Meta Title set (using article title).",
            status='ok',
        )

    length = len(meta_title)
    if length > META_TITLE_MAX:
        text = f"Meta title is too long ({length}/{META_TITLE_MAX} chars)."
    elif length < META_TITLE_MIN:
        text = "Meta title is too short."
    else:
        return SeoCheck('metaTitleLength', 10, "Meta title length is good.", 'good')
    return SeoCheck('metaTitleLength', 0, text, 'bad')


def check_meta_description(meta_description: Optional[str]) -> SeoCheck:
    length = len(meta_description or '')
    if length == 0:
        score, text = 0, "No meta description provided."
    elif length > META_DESCRIPTION_MAX:
        score, text = 0, f"Meta description is too long ({length}/{META_DESCRIPTION_MAX} chars)."
    elif length < META_DESCRIPTION_MIN:
        score, text = 5, f"Meta description is a bit short (under {META_DESCRIPTION_MIN} chars)."
    else:
        score, text = 10, "Meta description length is good."
    return SeoCheck('metaDescriptionLength', score, text, _status_for(score))


def analyze_seo(
    content: str,
    keyword: str = '',
    title: str = '',
    meta_title: Optional[str] = None,
    meta_description: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Run every check and return {'results': [...], 'average': float}.
    """
    results: List[SeoCheck] = [check_word_count(content)]

    keyword = (keyword or '').strip()
    if keyword:
        results.append(check_keyword_in_title(keyword, title, meta_title))

    results.append(check_meta_title(meta_title))
    results.append(check_meta_description(meta_description))

    average = sum(r.score for r in results) / len(results)
    return {
        'results': [asdict(r) for r in results],
        'average': round(average, 2),
    }
