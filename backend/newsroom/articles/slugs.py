import re
import unicodedata


def slugify(text: str) -> str:
    """
    제목을 URL-safe slug 로 변환합니다.

    >>> slugify("My First Post")
    'my-first-post'
    >>> slugify("Ça va, São Paulo?")
    'ca-va-sao-paulo'
    """
    # 악센트 등을 분해한 뒤 ASCII 로 표현 가능한 문자만 남긴다
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = ascii_text.lower().strip()
    slug = re.sub(r"[^a-z0-9\s_-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")
