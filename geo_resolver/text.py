"""Address text normalisation shared by scoring and the offline gazetteer"""

import re
import unicodedata
from typing import List, Optional

# Administrative-level markers carry no identity of their own
THAI_MARKERS = ("จังหวัด", "อำเภอ", "ตำบล", "แขวง", "เขต", "จ.", "อ.", "ต.")
LATIN_MARKERS = re.compile(
    r"\b(chang wat|amphoe|tambon|khet|khwaeng|province|sub-?district|district)\b"
)
PUNCTUATION = re.compile(r"[,;:()\[\]\"'/\\-]+|\.(?!\d)")
WHITESPACE = re.compile(r"\s+")

# Village number marker; the house number is written just before it
VILLAGE_MARKERS = ("moo", "m.", "หมู่", "หมู่ที่", "ม.")
HOUSE_NUMBER_MARKERS = ("เลขที่", "no.", "no")
RAW_TOKEN = re.compile(r"[^\s,;]+")

COMPANY_AFFIXES = re.compile(
    r"บริษัท|ห้างหุ้นส่วนจำกัด|หจก\.?|\(?มหาชน\)?|จำกัด"
    r"|\b(?:public\s+)?company\s+limited\b|\bco\.?,?\s*ltd\b\.?|\b(?:ltd|plc|inc|corp)\b\.?",
    re.IGNORECASE,
)


def normalize(text: Optional[str]) -> str:
    """Lower-case, strip administrative markers and punctuation, collapse spaces"""
    if not text:
        return ""
    value = unicodedata.normalize("NFC", text).lower()
    for marker in THAI_MARKERS:
        value = value.replace(marker, " ")
    value = LATIN_MARKERS.sub(" ", value)
    value = PUNCTUATION.sub(" ", value)
    return WHITESPACE.sub(" ", value).strip()


def tokens(text: Optional[str]) -> List[str]:
    return normalize(text).split()


def mentions(haystack: Optional[str], needle: Optional[str]) -> bool:
    """Whether ``needle`` occurs in ``haystack`` after normalisation

    Latin text must match on whole tokens; Thai is written without word
    breaks, so it matches as a substring.
    """
    target = normalize(needle)
    if not target:
        return False
    source = normalize(haystack)
    if not target.isascii():
        return target.replace(" ", "") in source.replace(" ", "")
    padded = f" {source} "
    return f" {target} " in padded


def house_numbers(address: Optional[str]) -> List[str]:
    """Tokens of ``address`` that sit where a house number is written

    That is the leading token, the token before a village marker
    ("Moo 4", "หมู่ 4") and the token after "เลขที่"/"No.".
    """
    raw = RAW_TOKEN.findall(unicodedata.normalize("NFC", address or "").lower())
    found = []
    for index, token in enumerate(raw):
        if index == 0 and token not in HOUSE_NUMBER_MARKERS:
            found.append(token)
        elif token in VILLAGE_MARKERS and index > 0:
            found.append(raw[index - 1])
        elif token in HOUSE_NUMBER_MARKERS and index + 1 < len(raw):
            found.append(raw[index + 1])
    return [token.strip(".") for token in found if any(char.isdigit() for char in token)]


def mentions_house_number(address: Optional[str], house_number: Optional[str]) -> bool:
    if not house_number:
        return False
    target = WHITESPACE.sub("", house_number).lower()
    return target in house_numbers(address)


def clean_company_name(name: Optional[str]) -> Optional[str]:
    """Company name without legal-form words such as บริษัท, จำกัด or Co., Ltd."""
    if not name:
        return None
    value = COMPANY_AFFIXES.sub(" ", unicodedata.normalize("NFC", name))
    value = WHITESPACE.sub(" ", value).strip(" ,.-")
    return value or None
